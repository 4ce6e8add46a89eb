from enum import Enum

from colorama import Fore, Style


class SeverityColor(Enum):
    ERROR = Fore.RED
    WARNING = Fore.YELLOW
    OK = Fore.GREEN
    INFO = Fore.CYAN


def format_finding(finding: dict) -> str:
    location = finding["source"]
    if finding.get("line"):
        location = f"{location}:{finding['line']}"
    return f"{location}: {finding['severity']} [{finding['check']}] {finding['message']}"


def print_audit_output(output: str, level: str = "INFO"):
    print(f"{SeverityColor[level.upper()].value}{output}{Style.RESET_ALL}")
