"""
Registry：參賽者名稱 -> 連線 ID 的對照表

職責：
1. 保證同一個名稱同時只對應一條連線
2. 斷線時只移除仍屬於該連線的紀錄

本身不加鎖，由 BuzzerGame 在臨界區內呼叫。
"""
from typing import Dict, List

from models import DuplicateNamePolicy
from core.exceptions import NameTaken
from services.naming_service import normalize_display_name


class Registry:
    """參賽者名稱登記表"""

    def __init__(self, policy: DuplicateNamePolicy = DuplicateNamePolicy.REJECT):
        self.policy = policy
        self._connections: Dict[str, str] = {}

    def register(self, connection_id: str, raw_name: str) -> str:
        """
        登記名稱

        參數：
            connection_id: 連線 ID
            raw_name: 使用者輸入的名稱（尚未去除空白）

        返回：
            去除空白後的名稱

        異常：
            ValidationRejected: 名稱為空白
            NameTaken: 名稱被其他連線佔用（policy=reject 時）
        """
        name = normalize_display_name(raw_name)

        holder = self._connections.get(name)
        if (
            holder is not None
            and holder != connection_id
            and self.policy == DuplicateNamePolicy.REJECT
        ):
            raise NameTaken(name)

        self._connections[name] = connection_id
        return name

    def unregister(self, name: str, connection_id: str) -> bool:
        """只有在名稱仍對應到同一條連線時才移除，返回是否真的移除"""
        if self._connections.get(name) != connection_id:
            return False
        del self._connections[name]
        return True

    def connection_for(self, name: str):
        return self._connections.get(name)

    def count(self) -> int:
        return len(self._connections)

    def names(self) -> List[str]:
        return sorted(self._connections)
