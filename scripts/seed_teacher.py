import argparse
from pathlib import Path
import sys

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from behavior_app.core.config import get_settings
from behavior_app.services.auth import upsert_teacher
from behavior_app.services.store import get_store


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create or update a teacher account.")
    parser.add_argument("--username", default=settings.bootstrap_teacher_username)
    parser.add_argument("--password", default=settings.bootstrap_teacher_password)
    parser.add_argument("--name", default="")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    action = upsert_teacher(get_store(), username=args.username, password=args.password, name=args.name)
    print(f"Teacher {args.username} {action}.")


if __name__ == "__main__":
    main()
