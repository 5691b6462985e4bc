# Hint Server
#
# Remote-control station for a display. Short text commands arrive as UDP
# datagrams and are dispatched to handlers that drive mpv and Pillow.
#
# Modules:
#   - tokenizer.py: Shell-like lexer for one command line
#   - commands.py: Command table and interpreter
#   - handlers.py: showhint, showbg, playmedia, exit
#   - server.py: UDP receive loop and command worker
#   - hint_server_app.py: Service entry point

__version__ = '1.0.0'
