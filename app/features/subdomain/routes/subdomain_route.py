from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.database.account_store import AccountStore
from app.features.auth.dependencies import get_store
from app.features.subdomain.schemas.subdomain_schema import SubdomainCheckRequest, SubdomainCheckResponse
from app.features.subdomain.utils import subdomain_util

router = APIRouter(prefix="/api/subdomain", tags=["Subdomain"])


@router.post("/validate", response_model=SubdomainCheckResponse)
def validate_subdomain(payload: SubdomainCheckRequest, store: AccountStore = Depends(get_store)):
    if not payload.subdomain:
        return JSONResponse(status_code=400, content={"valid": False, "message": "Subdomain is required"})

    result = subdomain_util.validate(payload.subdomain, store.subdomain_exists)
    return SubdomainCheckResponse(valid=result.valid, message=result.message)
