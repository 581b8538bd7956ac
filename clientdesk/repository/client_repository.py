"""Client repository for database operations."""
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, OperationalError, DBAPIError

from clientdesk.models.client import Client
from .exceptions import (
    DatabaseConnectionException,
    DatabaseOperationException,
)


class ClientRepository:
    """Repository for Client model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DatabaseOperationException("Failed to save client", detail=str(e.orig))
        except OperationalError as e:
            raise DatabaseConnectionException(detail=str(e.orig))
        except DBAPIError as e:
            raise DatabaseOperationException(detail=str(e.orig))

    async def create(
        self,
        name: str,
        cif: str,
        email: str | None = None,
        phone: str | None = None,
        web: str | None = None,
    ) -> Client:
        """Create a new client.

        Args:
            name: Client name
            cif: Tax identifier
            email: Contact email
            phone: Contact phone
            web: Website

        Returns:
            Created Client object

        Raises:
            DatabaseConnectionException: If database connection fails
            DatabaseOperationException: If database operation fails
        """
        client = Client(name=name, cif=cif, email=email, phone=phone, web=web)
        self.session.add(client)
        await self._flush()
        await self.session.refresh(client)
        return client

    async def get_by_id(self, client_id: int) -> Client | None:
        result = await self.session.execute(
            select(Client).where(Client.id == client_id)
        )
        return result.scalar_one_or_none()

    async def get_by_cif(self, cif: str) -> Client | None:
        """Get the first client holding a CIF.

        Args:
            cif: Tax identifier

        Returns:
            Client object if found, None otherwise
        """
        result = await self.session.execute(
            select(Client).where(Client.cif == cif).order_by(Client.id).limit(1)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Client]:
        """List every client in id order."""
        result = await self.session.execute(select(Client).order_by(Client.id))
        return list(result.scalars().all())

    async def exists_other_with_name(self, name: str, client_id: int) -> bool:
        """Check whether a client other than ``client_id`` uses ``name``."""
        result = await self.session.execute(
            select(Client.id)
            .where(Client.name == name, Client.id != client_id)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def exists_other_with_cif(self, cif: str, client_id: int) -> bool:
        """Check whether a client other than ``client_id`` uses ``cif``."""
        result = await self.session.execute(
            select(Client.id)
            .where(Client.cif == cif, Client.id != client_id)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def update(self, client: Client, fields: dict[str, Any]) -> Client:
        """Apply field changes to a client.

        Args:
            client: Client to modify
            fields: Column name to new value

        Returns:
            Updated Client object
        """
        for name, value in fields.items():
            setattr(client, name, value)
        await self._flush()
        return client

    async def delete(self, client: Client) -> None:
        """Delete a client."""
        await self.session.delete(client)
        await self._flush()
