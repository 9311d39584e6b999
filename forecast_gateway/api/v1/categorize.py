"""POST /v1/categorize - classify merchant/description strings"""

from fastapi import APIRouter

from forecast_gateway.api.v1.schemas import CategorizeRequest, CategorizeResponse
from forecast_gateway.domain.categories import categorize

router = APIRouter()


@router.post("/categorize", response_model=CategorizeResponse)
def categorize_texts(request_body: CategorizeRequest):
    """Label each text with a category; unknown merchants come back as "Other" """
    return CategorizeResponse(labels=[categorize(text, request_body.taxonomy) for text in request_body.texts])
