"""
命名服務：整理參賽者輸入的顯示名稱

純計算邏輯，不涉及狀態轉換
"""
from core.exceptions import ValidationRejected


def normalize_display_name(raw_name) -> str:
    """
    去除名稱前後空白並驗證

    規則：
    - 非字串（例如前端送來 null 或數字）一律視為無效
    - 去除前後空白後不可為空字串

    範例：
        normalize_display_name("  Alice ") -> "Alice"
        normalize_display_name("   ") -> ValidationRejected

    異常：
        ValidationRejected: 名稱無效
    """
    if not isinstance(raw_name, str):
        raise ValidationRejected()

    name = raw_name.strip()
    if not name:
        raise ValidationRejected()

    return name
