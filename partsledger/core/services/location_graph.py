"""
Storage location graph.

Locations form a tree (vehicle -> bin, building -> shelf -> crate).
Re-parenting walks the proposed ancestor chain to the root and refuses
any move that would make a location its own ancestor. Parts change
location only through Transfer entries on the ledger.
"""

import re

from partsledger.config import get_logger
from partsledger.core.entities.ledger import LedgerEntry, MovementKind
from partsledger.core.entities.location import (
    LocationKind,
    StorageLocation,
    normalize_location_code,
)
from partsledger.core.exceptions import (
    CycleDetectedError,
    DuplicateLocationError,
    InvalidLocationError,
    LocationNotFoundError,
    ValidationError,
)
from partsledger.core.interfaces.unit_of_work import IUnitOfWork, UnitOfWorkFactory
from partsledger.core.services.ledger import Ledger

logger = get_logger(__name__)

LOCATION_CODE_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9._-]{0,19}$")


class LocationGraph:
    """Creates, re-parents and resolves storage locations."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        ledger: Ledger,
        code_prefix: str = "LOC",
    ) -> None:
        self._uow_factory = uow_factory
        self._ledger = ledger
        self._code_prefix = code_prefix.upper()

    async def create_location(
        self,
        name: str,
        kind: LocationKind | str,
        code: str | None = None,
        parent_code: str | None = None,
        description: str | None = None,
        label_number: str | None = None,
    ) -> StorageLocation:
        """Create a location; the code is generated (``LOC-001``...) when omitted."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("name", "must not be empty")
        try:
            kind = LocationKind(kind)
        except ValueError as e:
            raise ValidationError("kind", "must be vehicle, building or container", kind) from e

        async with self._uow_factory() as uow:
            if parent_code is not None:
                parent_code = normalize_location_code(parent_code)
                parent = await uow.locations.get(parent_code)
                if parent is None:
                    raise LocationNotFoundError(parent_code)
                if not parent.active:
                    raise InvalidLocationError(parent_code, "parent location is inactive")

            if code is None:
                code = await self._next_code(uow)
            else:
                code = normalize_location_code(code)
                if not LOCATION_CODE_PATTERN.match(code):
                    raise ValidationError("code", "must be 1-20 alphanumeric characters", code)
                if await uow.locations.get(code) is not None:
                    raise DuplicateLocationError(code)

            location = await uow.locations.create(
                StorageLocation(
                    code=code,
                    name=name,
                    kind=kind,
                    parent_code=parent_code,
                    description=description,
                    label_number=label_number,
                )
            )

        logger.info(
            "location_created",
            code=location.code,
            kind=location.kind.value,
            parent_code=location.parent_code,
        )
        return location

    async def move_location(self, code: str, new_parent_code: str | None) -> StorageLocation:
        """Re-parent a location, or make it a root with ``new_parent_code=None``."""
        code = normalize_location_code(code)
        async with self._uow_factory() as uow:
            location = await uow.locations.get(code)
            if location is None:
                raise LocationNotFoundError(code)

            if new_parent_code is not None:
                new_parent_code = normalize_location_code(new_parent_code)
                new_parent = await uow.locations.get(new_parent_code)
                if new_parent is None:
                    raise LocationNotFoundError(new_parent_code)
                if not new_parent.active:
                    raise InvalidLocationError(new_parent_code, "parent location is inactive")

                # Walk the proposed ancestor chain up to the root
                seen: set[str] = set()
                current: StorageLocation | None = new_parent
                while current is not None:
                    if current.code == code or current.code in seen:
                        raise CycleDetectedError(code, new_parent_code)
                    seen.add(current.code)
                    current = (
                        await uow.locations.get(current.parent_code)
                        if current.parent_code
                        else None
                    )

            await uow.locations.set_parent(code, new_parent_code)

        logger.info(
            "location_moved",
            code=code,
            old_parent_code=location.parent_code,
            new_parent_code=new_parent_code,
        )
        return location.model_copy(update={"parent_code": new_parent_code})

    async def resolve_ancestry_path(self, code: str) -> list[StorageLocation]:
        """Locations from the root down to ``code`` inclusive."""
        code = normalize_location_code(code)
        async with self._uow_factory(read_only=True) as uow:
            location = await uow.locations.get(code)
            if location is None:
                raise LocationNotFoundError(code)

            path = [location]
            seen = {location.code}
            while location.parent_code is not None:
                parent = await uow.locations.get(location.parent_code)
                if parent is None:
                    raise LocationNotFoundError(location.parent_code)
                if parent.code in seen:
                    raise CycleDetectedError(code, parent.code)
                seen.add(parent.code)
                path.append(parent)
                location = parent

        path.reverse()
        return path

    async def get_location(self, code: str) -> StorageLocation:
        code = normalize_location_code(code)
        async with self._uow_factory(read_only=True) as uow:
            location = await uow.locations.get(code)
        if location is None:
            raise LocationNotFoundError(code)
        return location

    async def list_locations(self, active_only: bool = True) -> list[StorageLocation]:
        async with self._uow_factory(read_only=True) as uow:
            return await uow.locations.list_locations(active_only=active_only)

    async def children(self, code: str) -> list[StorageLocation]:
        code = normalize_location_code(code)
        async with self._uow_factory(read_only=True) as uow:
            if await uow.locations.get(code) is None:
                raise LocationNotFoundError(code)
            return await uow.locations.children(code)

    async def set_active(self, code: str, active: bool) -> StorageLocation:
        """Deactivated locations can no longer send or receive transfers."""
        code = normalize_location_code(code)
        async with self._uow_factory() as uow:
            location = await uow.locations.get(code)
            if location is None:
                raise LocationNotFoundError(code)
            await uow.locations.set_active(code, active)

        logger.info("location_active_changed", code=code, active=active)
        return location.model_copy(update={"active": active})

    async def transfer(
        self,
        part_code: str,
        from_location_code: str,
        to_location_code: str,
        reason: str | None = None,
        actor: str | None = None,
    ) -> LedgerEntry:
        """Move a part between locations via a zero-quantity Transfer entry."""
        entry = LedgerEntry(
            part_code=part_code,
            quantity=0,
            kind=MovementKind.TRANSFER,
            from_location_code=from_location_code,
            to_location_code=to_location_code,
            notes=reason or "Part transfer",
            actor=actor,
        )
        return await self._ledger.append(entry)

    async def _next_code(self, uow: IUnitOfWork) -> str:
        last = await uow.locations.last_generated_code(self._code_prefix)
        number = int(last.rsplit("-", 1)[1]) if last else 0
        while True:
            number += 1
            candidate = f"{self._code_prefix}-{number:03d}"
            if await uow.locations.get(candidate) is None:
                return candidate
