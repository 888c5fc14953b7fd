"""
API 層

- players：登記人數與名單
- rounds：主持人控制回合、輪詢狀態
- qrcode：加入用的 QR code
- websocket：參賽者與主持人的即時事件
"""
