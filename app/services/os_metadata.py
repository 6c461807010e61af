from app.models.environment import OSProfile

# Mobile platforms share tooling with their desktop relatives.
_PACKAGE_MANAGERS = {
    "mac": "brew",
    "ios": "brew",
    "windows": "winget",
    "linux": "apt",
    "android": "apt",
}

_SHELLS = {
    "mac": "zsh",
    "ios": "zsh",
    "windows": "powershell",
    "linux": "bash",
    "android": "bash",
}

_CONFIG_DIRS = {
    "windows": "%APPDATA%",
}

_ICONS = {
    "mac": "🍎",
    "ios": "🍎",
    "windows": "🪟",
    "linux": "🐧",
    "android": "🤖",
}

_DISPLAY_NAMES = {
    "mac": "macOS",
    "ios": "iOS",
    "windows": "Windows",
    "linux": "Linux",
    "android": "Android",
}

DEFAULT_PACKAGE_MANAGER = "npm"
DEFAULT_SHELL = "sh"
DEFAULT_CONFIG_DIR = "~/.config"
DEFAULT_ICON = "💻"
DEFAULT_DISPLAY_NAME = "Unknown OS"


def package_manager(os: str) -> str:
    return _PACKAGE_MANAGERS.get(os, DEFAULT_PACKAGE_MANAGER)


def default_shell(os: str) -> str:
    return _SHELLS.get(os, DEFAULT_SHELL)


def config_dir(os: str) -> str:
    return _CONFIG_DIRS.get(os, DEFAULT_CONFIG_DIR)


def os_icon(os: str) -> str:
    return _ICONS.get(os, DEFAULT_ICON)


def os_display_name(os: str) -> str:
    return _DISPLAY_NAMES.get(os, DEFAULT_DISPLAY_NAME)


def os_profile(os: str) -> OSProfile:
    """Collect every display fact for *os* into one model."""
    return OSProfile(
        os=os,
        name=os_display_name(os),
        icon=os_icon(os),
        shell=default_shell(os),
        package_manager=package_manager(os),
        config_dir=config_dir(os),
    )
