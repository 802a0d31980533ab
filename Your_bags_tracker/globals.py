# globals.py
import os
from pathlib import Path

user_data_path = os.environ.get(
    "BAGS_USER_DATA", str((Path(__file__).parent.parent / "user_data").as_posix())
)
