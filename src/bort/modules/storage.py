from pathlib import Path

from loguru import logger

STARTER_PROGRAM = """#!/usr/bin/env python3
# BORTtheBOT Robot Builder - Starter Program
# This preset is generated automatically for your new robot.
# Fill in your logic inside the placeholders below.

class Robot:
    def __init__(self):
        # Initialize your robot state here
        pass

    def setup(self):
        # Run once at startup
        pass

    def loop(self):
        # Main loop - called repeatedly
        pass

def main():
    robot = Robot()
    robot.setup()
    # Replace this simple loop with your control logic
    # while True: robot.loop()
    pass

if __name__ == '__main__':
    main()
"""

def starter_readme(bot_name: str) -> str:
    return "\n".join([
        f"# Robot: {bot_name}",
        "",
        "Files:",
        "- main.py  # Your starter Python file",
        "",
        "Set environment BOT_STORAGE_DIR to change this storage location.",
        "",
    ])

def bot_directory(base_dir: str | Path, bot_id: str) -> Path:
    """
    Resolve the storage folder of a bot.

    Raises:
        ValueError: If the bot id would escape the storage directory
    """
    if not bot_id or Path(bot_id).name != bot_id or bot_id in (".", ".."):
        raise ValueError(f"Bot id is not a valid folder name: {bot_id!r}")
    return Path(base_dir) / bot_id

def write_starter_files(base_dir: str | Path, bot_id: str, bot_name: str) -> Path:
    """
    Create the bot's local folder with a starter main.py and README.md.
    Existing files are left untouched.

    Args:
        base_dir: Root storage directory for all bots
        bot_id: Bot identifier, used as the folder name
        bot_name: Bot display name, written into the README

    Returns:
        Path to the bot folder

    Raises:
        OSError: If the folder or files cannot be written
        ValueError: If the bot id is not a valid folder name
    """
    bot_dir = bot_directory(base_dir, bot_id)
    bot_dir.mkdir(parents=True, exist_ok=True)

    preset_path = bot_dir / "main.py"
    if not preset_path.exists():
        preset_path.write_text(STARTER_PROGRAM, encoding="utf-8")

    readme_path = bot_dir / "README.md"
    if not readme_path.exists():
        readme_path.write_text(starter_readme(bot_name), encoding="utf-8")

    logger.debug(f"Starter files ready in {bot_dir}")
    return bot_dir
