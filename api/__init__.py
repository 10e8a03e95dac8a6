"""
API 層

只負責 HTTP：解析事件、呼叫 dispatcher、把結果轉成聊天訊息回傳。
遊戲邏輯全部在 core/ 與 services/。
"""
