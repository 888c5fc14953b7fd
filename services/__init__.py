"""
服務層

這個 package 包含不屬於遊戲規則本身的邏輯：
- BroadcastService：websocket 連線池與廣播
- RoundService：開始 / 清除回合並通知所有人
- NamingService：名稱整理
- QRCodeService：加入網址與 QR code
"""
