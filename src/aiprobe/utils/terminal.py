"""
Terminal display helpers for the CLI.
"""
import sys


class Colors:
    """Terminal color codes."""
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    @classmethod
    def supports_color(cls) -> bool:
        """Check if terminal supports color."""
        return hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()

    @classmethod
    def colorize(cls, text: str, color: str) -> str:
        """Add color if terminal supports it, otherwise return plain text."""
        if cls.supports_color():
            return f"{color}{text}{cls.ENDC}"
        return text


def score_color(score: float) -> str:
    """Color for a 0-100 AI score: red is AI-like, green is human-like."""
    if score > 70:
        return Colors.RED
    elif score > 40:
        return Colors.YELLOW
    return Colors.GREEN


def render_bar(score: float, width: int = 30) -> str:
    """Render a 0-100 score as a horizontal bar."""
    score = max(0.0, min(100.0, score))
    filled = int(width * score / 100)
    bar = '█' * filled + '░' * (width - filled)
    return f"|{Colors.colorize(bar, score_color(score))}| {score:5.1f}"


def print_header(title: str, width: int = 60):
    """Print title header."""
    print()
    print(Colors.colorize("=" * width, Colors.CYAN))
    padding = (width - len(title) - 4) // 2
    print(Colors.colorize("=" * padding + f"  {title}  " + "=" * padding, Colors.CYAN))
    print(Colors.colorize("=" * width, Colors.CYAN))


def print_section(title: str, width: int = 60):
    """Print section title."""
    print()
    line_len = width - len(title) - 5
    print(Colors.colorize(f"--- {title} " + "-" * line_len, Colors.BLUE))


def print_warning(message: str):
    """Print warning message."""
    print(f"{Colors.colorize('[WARN]', Colors.YELLOW)} {message}")


def print_error(message: str):
    """Print error message."""
    print(f"{Colors.colorize('[ERROR]', Colors.RED)} {message}", file=sys.stderr)


def print_info(message: str):
    """Print info message."""
    print(f"{Colors.colorize('[INFO]', Colors.BLUE)} {message}")
