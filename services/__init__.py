"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換：
- PotService：獎池計算
- TurnService：輪流順序
- ChamberService：50/50 隨機來源
- MessageService：聊天訊息格式
"""
