# Insert Sample Locations
import logging

from sqlmodel import Session, SQLModel

from db.session import engine
from models.location import CoordinatesPayload, LocationPayload
from services.location_service import LocationService

logger = logging.getLogger(__name__)

SAMPLE_LOCATIONS = [
    LocationPayload(
        name="The Willow",
        address="The Willow",
        post_code="RH2 7EN",
        distance=0,
        constituency="South East",
        admin_district="Surrey",
        coordinates=CoordinatesPayload(longitude=-0.181425, latitude=51.231602),
    ),
    LocationPayload(
        name="Clippers House, Clippers Quay",
        address="Clippers House, Clippers Quay",
        post_code="M50 3XP",
        distance=0,
        constituency="Salford and Eccles",
        admin_district="Salford",
        coordinates=CoordinatesPayload(longitude=-2.286226, latitude=53.466921),
    ),
    LocationPayload(
        name="Old Trafford Stadium",
        address="Old Trafford Stadium",
        post_code="M16 0RA",
        distance=0,
        constituency="Stretford and Urmston",
        admin_district="Trafford",
        coordinates=CoordinatesPayload(longitude=-2.291032, latitude=53.462559),
    ),
    LocationPayload(
        name="MediaCityUK",
        address="MediaCityUK",
        post_code="M50 3UQ",
        distance=0,
        constituency="Salford and Eccles",
        admin_district="City of Salford",
        coordinates=CoordinatesPayload(longitude=-2.2994, latitude=53.4721),
    ),
    LocationPayload(
        name="Manchester Piccadilly Station",
        address="Manchester Piccadilly Station",
        post_code="M1 2AP",
        distance=0,
        constituency="Manchester Central",
        admin_district="Manchester",
        coordinates=CoordinatesPayload(longitude=-2.235117, latitude=53.48117),
    ),
]


def seed_locations(session: Session) -> int:
    """Insert any sample location not already present. Returns how many were added."""
    added = 0
    for payload in SAMPLE_LOCATIONS:
        if LocationService.find_by_name(session, payload.name):
            logger.info("%s already exists", payload.name)
            continue
        LocationService.find_or_create(session, payload)
        added += 1
    session.commit()
    return added


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        count = seed_locations(session)
    logger.info("Seeded %d locations", count)
