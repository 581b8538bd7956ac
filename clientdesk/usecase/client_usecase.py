"""Client management usecase, including CSV export and import."""
import logging
from collections.abc import Iterator

from sqlalchemy.ext.asyncio import AsyncSession

from clientdesk.common.exceptions import (
    NotFoundException,
    DuplicateNameException,
    DuplicateCifException,
    UnreadableFileException,
    ServiceUnavailableException,
    UnexpectedPersistenceFailureException,
)
from clientdesk.domain.client_csv import CSVFormatError, extract_row, iter_export_lines, read_rows
from clientdesk.domain.schemas import (
    ClientCreateRequest,
    ClientUpdateRequest,
    ClientResponse,
    ClientImportResponse,
)
from clientdesk.repository.client_repository import ClientRepository
from clientdesk.repository.exceptions import (
    DatabaseConnectionException,
    DatabaseOperationException,
)

logger = logging.getLogger(__name__)


class ClientUsecase:
    """Usecase for client operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.client_repo = ClientRepository(session)

    async def list_clients(self) -> list[ClientResponse]:
        async with self.session.begin():
            clients = await self.client_repo.list_all()
        return [ClientResponse.model_validate(client) for client in clients]

    async def get_client(self, client_id: int) -> ClientResponse:
        async with self.session.begin():
            client = await self.client_repo.get_by_id(client_id)
        if not client:
            raise NotFoundException("Client not found")
        return ClientResponse.model_validate(client)

    async def create_client(self, request: ClientCreateRequest) -> ClientResponse:
        """Create a client.

        Name and CIF uniqueness is not checked here, only on update.

        Raises:
            ServiceUnavailableException: If database connection fails
            UnexpectedPersistenceFailureException: If database operation fails
        """
        try:
            async with self.session.begin():
                client = await self.client_repo.create(**request.model_dump())
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise UnexpectedPersistenceFailureException("Failed to create client")

        return ClientResponse.model_validate(client)

    async def update_client(self, client_id: int, request: ClientUpdateRequest) -> ClientResponse:
        """Partially update a client.

        Raises:
            NotFoundException: If client does not exist
            DuplicateNameException: If another client has the requested name
            DuplicateCifException: If another client has the requested CIF
        """
        changes = request.model_dump(exclude_none=True)

        try:
            async with self.session.begin():
                client = await self.client_repo.get_by_id(client_id)
                if not client:
                    raise NotFoundException("Client not found")

                if "name" in changes and await self.client_repo.exists_other_with_name(
                    changes["name"], client.id
                ):
                    raise DuplicateNameException()

                if "cif" in changes and await self.client_repo.exists_other_with_cif(
                    changes["cif"], client.id
                ):
                    raise DuplicateCifException()

                if changes:
                    client = await self.client_repo.update(client, changes)
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise UnexpectedPersistenceFailureException("Failed to update client")

        return ClientResponse.model_validate(client)

    async def delete_client(self, client_id: int) -> None:
        try:
            async with self.session.begin():
                client = await self.client_repo.get_by_id(client_id)
                if not client:
                    raise NotFoundException("Client not found")
                await self.client_repo.delete(client)
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise UnexpectedPersistenceFailureException("Failed to delete client")

    async def export_csv(self) -> Iterator[str]:
        """Load every client and return an iterator over the CSV export lines."""
        async with self.session.begin():
            clients = await self.client_repo.list_all()
        return iter_export_lines(clients)

    async def import_csv(self, content: bytes) -> ClientImportResponse:
        """Create clients from an uploaded CSV document.

        Rows without name or CIF, and rows whose CIF already exists (including
        one imported earlier in the same file), are skipped. Existing clients
        are never modified.

        Args:
            content: Raw bytes of the uploaded file

        Returns:
            Imported and skipped row counts

        Raises:
            UnreadableFileException: If the file is not a readable CSV document
        """
        try:
            index, rows = read_rows(content)
        except CSVFormatError as e:
            raise UnreadableFileException(str(e))

        imported = 0
        skipped = 0
        try:
            async with self.session.begin():
                for raw in rows:
                    row = extract_row(raw, index)
                    if not row.name or not row.cif:
                        skipped += 1
                        continue
                    if await self.client_repo.get_by_cif(row.cif):
                        skipped += 1
                        continue

                    # create() flushes, so the next row sees this CIF
                    await self.client_repo.create(
                        name=row.name,
                        cif=row.cif,
                        email=row.email,
                        phone=row.phone,
                        web=row.web,
                    )
                    imported += 1
        except DatabaseConnectionException:
            raise ServiceUnavailableException()
        except DatabaseOperationException:
            raise UnexpectedPersistenceFailureException("Failed to import clients")

        logger.info("Client CSV import finished: %d imported, %d skipped", imported, skipped)
        return ClientImportResponse(imported=imported, skipped=skipped)
