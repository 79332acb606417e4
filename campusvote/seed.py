"""Load a demo election into MongoDB.

    python -m campusvote.seed

Safe to run twice: existing positions (by title) and students (by index
number) are left alone.
"""
import logging

from campusvote import config
from campusvote.security import hash_password
from campusvote.status import ACTIVE
from campusvote.storage_mongo import MongoStorage, get_storage

logger = logging.getLogger(__name__)

POSITIONS = {
    "President": ["Ama Mensah", "Kwame Boateng"],
    "Secretary": ["Efua Owusu", "Yaw Asante", "Akosua Darko"],
    "Treasurer": ["Kofi Adjei", "Abena Ofori"],
}

STUDENTS = [
    ("UEB0000119", "Esi Appiah", "Year 2"),
    ("UEB0000219", "Kojo Antwi", "Year 3"),
    ("UEB0000319", "Adwoa Sarpong", "Year 1"),
]

DEFAULT_PASSWORD = "password123"


def seed(
    storage: MongoStorage,
    password: str = DEFAULT_PASSWORD,
    admin_username: str = config.ADMIN_USERNAME,
    admin_password: str = config.ADMIN_PASSWORD,
) -> None:
    if storage.get_election() is None:
        storage.save_election(status=ACTIVE)

    for order, (title, names) in enumerate(POSITIONS.items()):
        if storage.get_position_by_title(title) is not None:
            continue
        position = storage.save_position(title, order=order)
        for name in names:
            storage.save_candidate(position.id, name)
        logger.info(f"Seeded position {title} with {len(names)} candidates")

    for index_number, full_name, year in STUDENTS:
        if storage.get_student_by_index_number(index_number) is None:
            storage.save_student(index_number, full_name, hash_password(password), year=year)

    if storage.get_admin_by_username(admin_username) is None:
        storage.save_admin(admin_username, hash_password(admin_password))


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    seed(get_storage())
