# app/core/exceptions.py
# 應用程式錯誤分類：回應 body 一律是以欄位為 key 的 dict
from typing import Dict, Optional


class AppError(Exception):
    """所有可預期錯誤的基底類別 (由 main.py 的 exception handler 轉成 JSON)"""
    status_code = 500

    def __init__(self, errors: Dict[str, str], headers: Optional[Dict[str, str]] = None):
        super().__init__(errors)
        self.errors = errors
        self.headers = headers


class ValidationError(AppError):
    """400：呼叫端可修正的欄位錯誤"""
    status_code = 400


class ConflictError(AppError):
    """400：handle 已被其他使用者佔用"""
    status_code = 400


class NotFoundError(AppError):
    """404：找不到 Profile 或子項目"""
    status_code = 404


class AuthenticationError(AppError):
    """401：未通過驗證，不回傳任何細節"""
    status_code = 401

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__({"detail": detail}, headers={"WWW-Authenticate": "Bearer"})


class VerificationError(AppError):
    """500：驗證 Token 時查詢使用者失敗 (與 401 區分)"""
    status_code = 500

    def __init__(self):
        super().__init__({"error": "Server error"})
