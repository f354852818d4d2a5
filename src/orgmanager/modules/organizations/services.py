"""Organization lifecycle: create, read, update and delete tenants."""

from typing import Any
from uuid import UUID

import structlog
from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from orgmanager.core.auth.backend import PasswordHasher
from orgmanager.core.auth.schemas import PrincipalClaims
from orgmanager.core.constants import (
    MAX_ORG_NAME_LENGTH,
    MAX_PASSWORD_BYTES,
    MIN_ORG_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    ROLE_ORG_ADMIN,
    ROLE_SUPER_ADMIN,
)
from orgmanager.core.database.tenant import TenantStore
from orgmanager.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StoreFailureError,
    ValidationError,
)
from orgmanager.modules.admins.models import AdminUser
from orgmanager.modules.admins.repos import AdminRepository
from orgmanager.modules.organizations.models import Organization
from orgmanager.modules.organizations.repos import OrganizationRepository
from orgmanager.modules.organizations.schemas import (
    OrganizationCreated,
    OrganizationDeleted,
    OrganizationRead,
    OrganizationUpdated,
)


logger = structlog.get_logger()


class OrganizationLifecycle:
    """Orchestrates organization creation, lookup, update and deletion.

    Registry writes and tenant namespace writes are sequential steps.
    Nothing here rolls back a partial sequence; on PostgreSQL the
    request's transaction does.
    """

    def __init__(
        self,
        organizations: OrganizationRepository,
        admins: AdminRepository,
        tenants: TenantStore,
        hasher: PasswordHasher,
        min_password_length: int = MIN_PASSWORD_LENGTH,
    ) -> None:
        self.organizations = organizations
        self.admins = admins
        self.tenants = tenants
        self.hasher = hasher
        self.min_password_length = min_password_length

    async def create(self, org_name: str, email: str, password: str) -> OrganizationCreated:
        """Create an organization, its admin principal and its tenant namespace.

        Args:
            org_name: Unique organization name
            email: Admin email, globally unique
            password: Admin password

        Returns:
            Summary including the generated namespace id

        Raises:
            ValidationError: If any input is missing or malformed
            ConflictError: If the name, its namespace or the admin email is taken
            StoreFailureError: If the store fails
        """
        self._validate(org_name, email, password)

        try:
            if await self.organizations.get_by_name(org_name):
                raise ConflictError(
                    "Organization with this name already exists",
                    details={"organization_name": org_name},
                )
            namespace = self.tenants.namespace_for(org_name)
            if await self.organizations.get_by_namespace(namespace):
                raise ConflictError(
                    "Organization name maps to a namespace already in use",
                    error_code="namespace_exists",
                    details={"organization_name": org_name, "namespace": namespace},
                )
            if await self.admins.get_by_email(email):
                raise ConflictError(
                    "Admin email already registered",
                    error_code="email_exists",
                )

            handle = await self.tenants.create(org_name)
            password_hash = self.hasher.hash(password)

            admin = await self.admins.create(
                AdminUser(
                    admin_email=email,
                    password_hash=password_hash,
                    role=ROLE_ORG_ADMIN,
                    organization_id=None,
                    organization_name=org_name,
                    is_active=True,
                )
            )
            await handle.add_user(email, password_hash, ROLE_ORG_ADMIN)

            organization = await self.organizations.create(
                Organization(
                    organization_name=org_name,
                    namespace=handle.namespace,
                    admin_email=email,
                    admin_id=admin.id,
                    is_active=True,
                )
            )
            await self.admins.set_organization(admin, organization.id, org_name)
        except IntegrityError as exc:
            raise ConflictError(
                "Organization or admin email already exists",
                details={"organization_name": org_name},
            ) from exc
        except SQLAlchemyError as exc:
            raise StoreFailureError("Failed to create organization") from exc

        logger.info(
            "organization_created",
            organization_name=org_name,
            namespace=handle.namespace,
            admin_id=str(admin.id),
        )
        return OrganizationCreated(
            id=str(organization.id),
            organization_name=organization.organization_name,
            db_name=organization.namespace,
            admin_email=organization.admin_email,
            created_at=organization.created_at,
        )

    async def get(self, org_name: str) -> OrganizationRead:
        """Read an organization from the registry.

        Raises:
            ValidationError: If the name is missing
            NotFoundError: If no organization has this name
        """
        if not org_name:
            raise ValidationError("Organization name is required")

        organization = await self._find(org_name)
        return self._to_read(organization)

    async def update(self, org_name: str, email: str, password: str) -> OrganizationUpdated:
        """Replace the admin's email and password.

        The password is always re-hashed. The admin principal, the
        registry's contact email and the tenant mirror are written
        independently.

        Raises:
            ValidationError: If any input is missing or malformed
            NotFoundError: If the organization or its admin is absent
            ConflictError: If the new email belongs to another admin
            StoreFailureError: If the store fails
        """
        self._validate(org_name, email, password)
        organization = await self._find(org_name)

        try:
            admin = (
                await self.admins.get_by_id(organization.admin_id)
                if organization.admin_id
                else None
            )
            if admin is None:
                raise NotFoundError("Organization admin not found", resource="admin")

            other = await self.admins.get_by_email(email)
            if other is not None and other.id != admin.id:
                raise ConflictError(
                    "Admin email already registered",
                    error_code="email_exists",
                )

            password_hash = self.hasher.hash(password)
            await self.admins.update_credentials(admin, email, password_hash)
            await self.organizations.update_admin_email(organization, email)
            updated = await self.tenants.resolve(org_name).update_credentials(
                email, password_hash, ROLE_ORG_ADMIN
            )
        except IntegrityError as exc:
            raise ConflictError("Admin email already registered", error_code="email_exists") from exc
        except SQLAlchemyError as exc:
            raise StoreFailureError("Failed to update organization") from exc

        if not updated:
            logger.warning("tenant_mirror_not_updated", organization_name=org_name)
        logger.info("organization_updated", organization_name=org_name)
        return OrganizationUpdated(organization_name=org_name)

    async def delete(
        self, org_name: str, requesting_principal_id: UUID | str | None = None
    ) -> OrganizationDeleted:
        """Delete the registry record, the admin principal, then the namespace.

        A failure between steps leaves the later steps undone.

        Raises:
            ValidationError: If the name is missing
            NotFoundError: If no organization has this name
            StoreFailureError: If the store fails
        """
        if not org_name:
            raise ValidationError("Organization name is required")

        organization = await self._find(org_name)
        admin_id = organization.admin_id

        try:
            await self.organizations.delete(organization)
            if admin_id is not None:
                await self.admins.delete(admin_id)
            namespace = await self.tenants.drop(org_name)
        except SQLAlchemyError as exc:
            raise StoreFailureError("Failed to delete organization") from exc

        logger.info(
            "organization_deleted",
            organization_name=org_name,
            namespace=namespace,
            requested_by=str(requesting_principal_id) if requesting_principal_id else None,
        )
        return OrganizationDeleted(organization_name=org_name)

    @staticmethod
    def authorize(principal: PrincipalClaims, org_name: str) -> None:
        """Allow super-admins everywhere and org admins on their own organization.

        Raises:
            ForbiddenError: If the principal may not manage ``org_name``
        """
        if principal.role == ROLE_SUPER_ADMIN:
            return
        if principal.organization_name != org_name:
            raise ForbiddenError(
                "Cannot manage other organizations",
                details={"organization_name": org_name},
            )

    async def _find(self, org_name: str) -> Organization:
        try:
            organization = await self.organizations.get_by_name(org_name)
        except SQLAlchemyError as exc:
            raise StoreFailureError("Failed to read organization") from exc
        if organization is None:
            raise NotFoundError(
                "Organization not found",
                resource="organization",
                resource_id=org_name,
            )
        return organization

    def _validate(self, org_name: str, email: str, password: str) -> None:
        """Reject missing or malformed input before touching the store."""
        if not org_name or not email or not password:
            raise ValidationError(
                "Organization name, email, and password are required"
            )

        errors: list[dict[str, Any]] = []
        if not MIN_ORG_NAME_LENGTH <= len(org_name) <= MAX_ORG_NAME_LENGTH:
            errors.append(
                {
                    "field": "organization_name",
                    "message": (
                        f"Organization name must be {MIN_ORG_NAME_LENGTH} to "
                        f"{MAX_ORG_NAME_LENGTH} characters"
                    ),
                }
            )
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            errors.append({"field": "email", "message": "Invalid email format"})
        if len(password) < self.min_password_length:
            errors.append(
                {
                    "field": "password",
                    "message": (
                        f"Password must be at least {self.min_password_length} characters"
                    ),
                }
            )
        elif len(password.encode()) > MAX_PASSWORD_BYTES:
            errors.append(
                {
                    "field": "password",
                    "message": f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
                }
            )
        if errors:
            raise ValidationError(errors=errors)

    @staticmethod
    def _to_read(organization: Organization) -> OrganizationRead:
        return OrganizationRead(
            id=str(organization.id),
            organization_name=organization.organization_name,
            db_name=organization.namespace,
            admin_email=organization.admin_email,
            created_at=organization.created_at,
            is_active=organization.is_active,
        )
