import os

# Maximum number of tokens in a single command line
NTOKENS = 16

# A datagram filling the whole buffer is treated as truncated
RECEIVE_BUFFER_SIZE = 1024

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 40000

DEFAULT_BACKGROUND = "bg.jpg"
DEFAULT_HINT_BACKGROUND = "hbg.jpg"

# Default media directory is ~/Media/
DEFAULT_MEDIA_SUBDIR = "Media"

# Rendered hints alternate between tmp0.png and tmp1.png
HINT_OUTPUT_SLOTS = 2
HINT_OUTPUT_PREFIX = "tmp"
HINT_OUTPUT_SUFFIX = ".png"

MPV_SOCKET_PATH = os.path.join("/tmp", "hint-server-mpv-socket")

# How often the receive loop wakes up to check for shutdown
RECEIVE_POLL_INTERVAL_SEC = 0.5

# Caption rendering
CAPTION_FONT_SIZE = 80
CAPTION_INTERLINE_SPACING = 60
CAPTION_STROKE_WIDTH = 8
CAPTION_MARGIN = 100

# Parsed commands waiting for the worker; more are dropped
COMMAND_QUEUE_SIZE = 64
