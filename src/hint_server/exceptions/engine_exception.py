from hint_server.exceptions import hint_server_exception


class PlaybackException(hint_server_exception.HintServerException):

    def __init__(self, message: str, path: str = None):
        self.path = path
        if path:
            message = f"{message} ({path})"
        super().__init__(message)


class CaptionException(hint_server_exception.HintServerException):

    def __init__(self, image_path: str, message: str = None):
        self.image_path = image_path
        text = f"Could not render caption onto {image_path}."
        if message:
            text = f"{text} {message}"
        super().__init__(text)
