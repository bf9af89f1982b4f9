"""
Terminal display for the roomchat client.

Colours each server line by what kind of notice it is.
"""

from colorama import Fore, Style

SERVER_PREFIX = '[Server]'
ANNOUNCE_PREFIX = '[ANNOUNCE]'
CLIENT_PREFIX = '[Client]'
ERROR_LINES = (
    'Invalid room.',
    'You are not in any room.',
    'Server is full!',
    'Message too long',
)


def classify(line: str) -> str:
    if line.startswith(ANNOUNCE_PREFIX):
        return 'announce'
    if line.startswith(SERVER_PREFIX) or line.startswith('Welcome!') or line.startswith('You joined'):
        return 'system'
    if line.startswith(ERROR_LINES):
        return 'error'
    if line.startswith(CLIENT_PREFIX):
        return 'local'
    return 'chat'


def colored(kind: str, text: str) -> str:
    if kind == 'error':
        return Fore.RED + text + Style.RESET_ALL
    if kind == 'announce':
        return Fore.GREEN + text + Style.RESET_ALL
    if kind == 'system':
        return Fore.YELLOW + text + Style.RESET_ALL
    if kind == 'local':
        return Fore.CYAN + text + Style.RESET_ALL
    return text


class Display:
    """Writes server and client notices to the terminal."""

    def __init__(self, use_color: bool = True, output=print):
        self.use_color = use_color
        self.output = output

    def render(self, line: str) -> str:
        if not self.use_color:
            return line
        return colored(classify(line), line)

    def show(self, line: str):
        self.output(self.render(line))
