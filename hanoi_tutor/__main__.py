"""Allow ``python -m hanoi_tutor``."""

from hanoi_tutor.cli.commands import main_entry

if __name__ == "__main__":
    main_entry()
