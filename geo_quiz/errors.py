"""
errors.py
======================

パッケージ共通の例外クラス。

- DataSourceError:        国データの取得・解析に失敗した（読み込み 1 回分が失敗）
- RepositoryNotLoadedError: 国データを読み込む前にプール作成・出題を呼んだ

出題時のデータ不足は例外にせず、短い（または空の）結果で表現する。
"""

from __future__ import annotations

from typing import Optional


class DataSourceError(Exception):
    """
    上流 API の通信失敗・HTTP エラー・不正なペイロード。

    HTTP ステータスが原因の場合は status_code / reason を保持する。
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class RepositoryNotLoadedError(RuntimeError):
    """load_repository() 完了前に国データを使おうとした。"""
