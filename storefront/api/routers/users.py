from fastapi import APIRouter, Depends
from requests import RequestException
from sqlalchemy.orm import Session

from storefront.api.deps import get_address_client
from storefront.data.database import get_db
from storefront.domain.errors import InvalidRequest, UpstreamUnavailable
from storefront.domain.schemas import AddressIn, UserCreate, UserRead
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def get_service(db: Session = Depends(get_db), address_client=Depends(get_address_client)):
    return UserService(db, address_client=address_client)


@router.post("", response_model=UserRead)
def create_user(payload: UserCreate, service: UserService = Depends(get_service)):
    return service.create_user(payload)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, service: UserService = Depends(get_service)):
    return service.get_user(user_id)


@router.put("/{user_id}/address", response_model=UserRead)
def save_address(user_id: int, payload: AddressIn, service: UserService = Depends(get_service)):
    try:
        return service.save_address(user_id, payload)
    except ValueError as e:
        raise InvalidRequest(str(e))
    except RequestException as e:
        raise UpstreamUnavailable(f"Address validation unavailable: {e}")
