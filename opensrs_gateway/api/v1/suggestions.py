"""Name suggestion endpoint"""
from fastapi import APIRouter, Depends

from opensrs_gateway.api.deps import get_opensrs_client
from opensrs_gateway.api.responses import envelope, require_success
from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.schemas.suggestion import SuggestionRequest

router = APIRouter()


@router.post("/suggestions")
async def name_suggest(
    request: SuggestionRequest,
    client: OpenSRSClient = Depends(get_opensrs_client)
):
    """Suggest available names related to a search string"""
    result = require_success(
        await client.name_suggest(
            request.search_string,
            services=request.services,
            tlds=request.tlds,
            languages=request.languages,
            max_wait_time=request.max_wait_time,
            search_key=request.search_key,
        ),
        "Failed to get domain suggestions",
    )
    empty = {"count": 0, "items": []}
    data = {
        "suggestions": result.suggestions or empty,
        "lookups": result.lookups or empty,
        "premium": result.premium or empty,
        "personal_names": result.personal_names or empty,
        "is_search_completed": result.is_search_completed,
        "response_time": result.response_time,
    }
    return envelope(result, data=data, searchString=request.search_string)
