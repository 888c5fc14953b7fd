"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層統一處理

這些都是預期中的拒絕（使用者可以重試），只回覆給發送者，
不會當作系統錯誤處理。
"""


class BuzzerGameException(Exception):
    """所有遊戲異常的基類"""
    reason = "Rejected"
    message = "操作被拒絕"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ============ 登記相關異常 ============

class ValidationRejected(BuzzerGameException):
    """名稱去除空白後為空字串"""
    reason = "ValidationRejected"
    message = "名稱不可為空白"


class NameTaken(BuzzerGameException):
    """名稱已被其他連線使用"""
    reason = "NameTaken"
    message = "這個名稱已經有人使用"

    def __init__(self, name):
        self.name = name
        super().__init__()


class RenameDuringRound(BuzzerGameException):
    """回合進行中不能更換名稱（排行以名稱為準）"""
    reason = "RenameDuringRound"
    message = "回合進行中不能更換名稱"


# ============ 搶答相關異常 ============

class NotRegistered(BuzzerGameException):
    """尚未登記名稱就按下搶答"""
    reason = "NotRegistered"
    message = "請先登記名稱"


class NotActive(BuzzerGameException):
    """回合尚未開始"""
    reason = "NotActive"
    message = "請等待主持人開始"


class AlreadyBuzzed(BuzzerGameException):
    """同一回合內已經搶答過了"""
    reason = "AlreadyBuzzed"
    message = "你已經搶答過了"

    def __init__(self, name):
        self.name = name
        super().__init__()
