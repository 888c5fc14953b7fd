"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- Registry：參賽者名稱登記
- RoundController：回合狀態（IDLE / ACTIVE）
- BuzzLedger：搶答排名
- GameManager：唯一的狀態擁有者，集中加鎖
- Locks：並發控制工具
"""
