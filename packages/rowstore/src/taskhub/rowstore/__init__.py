"""TaskHub RowStore -- 远端 REST 存储后端

packages/rowstore 的公开接口导出。
"""

from .client import PostgrestRowStore, build_filter_params, build_select
from .config import RowStoreConfig, load_rowstore_config


def create_postgrest_store(config: RowStoreConfig) -> PostgrestRowStore:
    """根据配置创建远端 RowStore"""
    return PostgrestRowStore(
        base_url=config.base_url,
        api_key=config.api_key.get_secret_value(),
        timeout_s=config.timeout_s,
    )


__all__ = [
    "PostgrestRowStore",
    "RowStoreConfig",
    "build_filter_params",
    "build_select",
    "create_postgrest_store",
    "load_rowstore_config",
]
