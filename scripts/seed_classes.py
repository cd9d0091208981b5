from pathlib import Path
import sys

if __package__ is None or __package__ == "":
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from behavior_app.schemas.classes import ClassSaveRequest
from behavior_app.services.classes import save_class
from behavior_app.services.records import normalize_key, read_classes
from behavior_app.services.store import get_store


DEFAULT_ROOMS = (1, 2)


def main() -> None:
    store = get_store()
    existing = {normalize_key(item.name) for item in read_classes(store)}
    inserted = 0
    for grade in range(1, 7):
        for room in DEFAULT_ROOMS:
            class_name = f"ม.{grade}/{room}"
            if normalize_key(class_name) in existing:
                continue
            result = save_class(store, ClassSaveRequest(name=class_name))
            if result["success"]:
                inserted += 1
    print(f"Inserted classes: {inserted}")


if __name__ == "__main__":
    main()
