"""Fixed-value color rules, read-only for every signed-in user."""

from fastapi import APIRouter, Depends

from eazyliens.application.schemas.color_rule import ColorRuleResponse
from eazyliens.domain.coloring import ColorRuleTable
from eazyliens.domain.entities import User
from eazyliens.infrastructure.dependencies import get_color_rules, get_current_user

router = APIRouter(prefix="/color-rules", tags=["Color rules"])


@router.get("", response_model=list[ColorRuleResponse])
async def list_color_rules(
    rules: ColorRuleTable = Depends(get_color_rules),
    _user: User = Depends(get_current_user),
) -> list[ColorRuleResponse]:
    """The rule table loaded at startup, so clients color cells the same way."""
    return [ColorRuleResponse.model_validate(rule) for rule in rules.rules()]
