import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from models.location import Location, LocationPayload

logger = logging.getLogger(__name__)


class LocationService:

    @staticmethod
    def list_locations(session: Session) -> List[Location]:
        return list(session.exec(select(Location).order_by(Location.name)).all())

    @staticmethod
    def find_by_name(session: Session, name: str) -> Location | None:
        return session.exec(select(Location).where(Location.name == name)).first()

    @staticmethod
    def find_or_create(session: Session, payload: LocationPayload) -> Location:
        """
        Return the location named in the payload, creating it on first reference.

        An existing location is reused as-is: differing address or
        coordinates in the payload are ignored. Lookup and insert are two
        steps; the unique index on name turns a lost race into an
        IntegrityError, after which the winner's row is returned.

        A new row is only flushed; the caller's commit persists it together
        with the shift that references it, and a rollback discards both.
        """
        location = LocationService.find_by_name(session, payload.name)
        if location:
            return location

        location = Location(
            name=payload.name,
            address=payload.address,
            post_code=payload.post_code,
            distance=payload.distance if payload.distance is not None else 0.0,
            constituency=payload.constituency,
            admin_district=payload.admin_district,
            longitude=payload.coordinates.longitude,
            latitude=payload.coordinates.latitude,
            use_rota_cloud=payload.coordinates.use_rota_cloud,
        )
        session.add(location)
        try:
            session.flush()
        except IntegrityError:
            session.rollback()
            existing = LocationService.find_by_name(session, payload.name)
            if existing is None:
                raise
            logger.info("Location %r was created concurrently, reusing id=%s", payload.name, existing.id)
            return existing

        logger.info("Created location %r (id=%s)", location.name, location.id)
        return location
