# app/utils/profile_fields.py
# 將前端送來的欄位袋轉成要寫入 Profile 的欄位 (純函式，不碰資料庫)
from typing import Any, Dict, List, Union

from app.schemas.profile_schema import SOCIAL_KEYS

# 一般字串欄位 (handle 另外處理)
SCALAR_FIELDS = ("company", "website", "location", "bio", "status", "githubusername")


def _normalize(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def normalize_handle(value: str) -> str:
    """' Neo ' / 'NEO' -> 'neo'"""
    return str(value or "").strip().lower()


def parse_skills(value: Union[str, List[str], None]) -> List[str]:
    """
    'python, , fastapi ' -> ['python', 'fastapi']
    已經是列表時視為拆好的片段，一樣 trim 並去掉空字串
    """
    if value is None:
        return []
    pieces = value.split(",") if isinstance(value, str) else value
    return [piece.strip() for piece in pieces if piece and piece.strip()]


def build_social(data: Dict[str, Any]) -> Dict[str, str]:
    """
    每次都重新建立 social (不是逐欄 patch)：
    沒有傳入的 key 直接省略，不會補空字串
    """
    return {key: _normalize(data[key]) for key in SOCIAL_KEYS if data.get(key)}


def build_profile_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    data 只包含前端「有傳」的欄位 (model_dump(exclude_unset=True))。
    回傳要 $set 到 Profile 的欄位；沒出現在結果中的欄位維持原值。
    """
    fields: Dict[str, Any] = {}

    handle = normalize_handle(data.get("handle"))
    if handle:
        fields["handle"] = handle

    for key in SCALAR_FIELDS:
        if data.get(key):
            fields[key] = _normalize(data[key])

    # skills 只要有傳 (即使是空字串) 就覆蓋
    if data.get("skills") is not None:
        fields["skills"] = parse_skills(data["skills"])

    fields["social"] = build_social(data)
    return fields
