import os
import platform
import subprocess

from .errors import OpenerError


def open_with_default_app(path: str):
    """Open a local file with the system's default application."""
    try:
        if platform.system() == 'Windows':
            os.startfile(path)
        elif platform.system() == 'Darwin':
            subprocess.run(['open', path], check=True)
        else:
            subprocess.run(['xdg-open', path], check=True)
    except FileNotFoundError as e:
        raise OpenerError("Could not find system command ('open' or 'xdg-open').") from e
    except subprocess.CalledProcessError as e:
        raise OpenerError(f"Error opening file with system command: {e}") from e
    except OSError as e:
        raise OpenerError(f"Error opening {path}: {e}") from e
