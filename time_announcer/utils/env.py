from __future__ import annotations

from dotenv import load_dotenv as dotenv_load_dotenv


def load_dotenv(env_file: str | None) -> bool:
    """Load TIME_ANNOUNCER_* settings from a dotenv file if present.

    Variables already set in the environment win over the file.
    """

    if not env_file:
        return False

    return dotenv_load_dotenv(env_file, override=False)
