"""Business service for tenants and their founders."""

from typing import List

from saas_backend.core.exceptions import ResourceNotFoundError, ValidationError
from saas_backend.models.business import Business
from saas_backend.models.person import Person
from saas_backend.schemas.schemas import (
    ADDRESS_FIELDS, BusinessCreate, BusinessOut, BusinessUpdate, business_out,
)
from saas_backend.services.base import EntityService


class BusinessService(EntityService):
    """Manages businesses. A business must be founded by a live person."""

    def create(self, data: BusinessCreate) -> Business:
        self.logger.info("Creating new business: %s", data.name)

        founder = self.db.get(Person, data.founder_id)
        if founder is None or founder.is_deleted:
            raise ValidationError(f'Founder with ID "{data.founder_id}" not found.')

        business = Business(
            name=data.name,
            description=data.description,
            telephone=data.telephone,
            email=data.email,
            url=data.url,
            founder_id=founder.id,
        )
        self._apply_address(business, data.address)
        business.same_as = data.same_as or []
        business.opening_hours = data.opening_hours or []

        self.db.add(business)
        self.db.commit()
        self.db.refresh(business)

        self._invalidate("businesses:*")
        self.logger.info("Successfully created business with id: %s", business.id)
        return business

    def list(self, page: int = 1, page_size: int = 10) -> List[BusinessOut]:
        key = f"businesses:all:{page}:{page_size}"
        if self.cache is not None:
            cached = self.cache.get_json(key)
            if cached is not None:
                return [BusinessOut.model_validate(item) for item in cached]

        businesses = (
            self.db.query(Business)
            .filter(Business.is_deleted.is_(False))
            .order_by(Business.created_at, Business.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        result = [business_out(b) for b in businesses]
        if self.cache is not None:
            self.cache.set_json(key, [b.model_dump(mode="json") for b in result])
        return result

    def get(self, business_id: str) -> Business:
        business = self.db.get(Business, business_id)
        if business is None or business.is_deleted:
            raise ResourceNotFoundError(f"Business with id {business_id} not found")
        return business

    def list_by_founder(self, founder_id: str) -> List[Business]:
        return (
            self.db.query(Business)
            .filter(Business.founder_id == founder_id, Business.is_deleted.is_(False))
            .order_by(Business.created_at, Business.id)
            .all()
        )

    def update(self, business_id: str, data: BusinessUpdate) -> Business:
        self.logger.info("Updating business with id: %s", business_id)
        business = self.get(business_id)
        changes = data.model_dump(exclude_unset=True)

        if "address" in changes:
            changes.pop("address")
            self._apply_address(business, data.address)
        for field in ("same_as", "opening_hours"):
            if field in changes:
                setattr(business, field, changes.pop(field) or [])
        if changes.get("name") is None:
            changes.pop("name", None)
        for field, value in changes.items():
            setattr(business, field, value)

        self.db.commit()
        self.db.refresh(business)
        self._invalidate("businesses:*")
        self.logger.info("Successfully updated business with id: %s", business_id)
        return business

    def soft_delete(self, business_id: str) -> Business:
        self.logger.info("Soft deleting business with id: %s", business_id)
        business = self.get(business_id)
        business.soft_delete()
        self.db.commit()
        self.db.refresh(business)
        self._invalidate("businesses:*")
        self.logger.info("Successfully soft deleted business with id: %s", business_id)
        return business

    def restore(self, business_id: str) -> Business:
        self.logger.info("Restoring business with id: %s", business_id)
        business = self.db.get(Business, business_id)
        if business is None:
            raise ResourceNotFoundError(f"Business with id {business_id} not found")

        if not business.is_deleted:
            self.logger.warning("Business with id %s is not deleted, no action needed", business_id)
            return business

        business.restore()
        self.db.commit()
        self.db.refresh(business)
        self._invalidate("businesses:*")
        self.logger.info("Successfully restored business with id: %s", business_id)
        return business

    @staticmethod
    def _apply_address(business: Business, address) -> None:
        for field in ADDRESS_FIELDS:
            setattr(business, field, getattr(address, field) if address is not None else None)
