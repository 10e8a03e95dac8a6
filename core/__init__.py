"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- 狀態機：集中管理所有狀態轉換
- Manager：管理每個頻道遊戲的生命週期
- Registry：頻道 → 遊戲的對照表
- Locks：並發控制工具
"""
