"""查询描述 -- 过滤谓词、排序与关联视图

与具体存储无关的值对象，由各 RowStore 实现翻译为 SQL 或 REST 查询参数。
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Eq:
    """column = value（value 为 None 时表示 IS NULL）"""

    column: str
    value: Any


@dataclass(frozen=True)
class Neq:
    """column != value"""

    column: str
    value: Any


@dataclass(frozen=True)
class Gte:
    """column >= value（用于时间窗口）"""

    column: str
    value: Any


@dataclass(frozen=True)
class Contains:
    """大小写不敏感的子串匹配"""

    column: str
    text: str


@dataclass(frozen=True)
class AnyOf:
    """多个谓词的 OR 组合"""

    predicates: tuple["Predicate", ...]

    def __init__(self, *predicates: "Predicate") -> None:
        object.__setattr__(self, "predicates", tuple(predicates))


Predicate = Eq | Neq | Gte | Contains | AnyOf


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class Embed:
    """关联视图：按本表外键列嵌入另一张表的若干列

    结果行中以 alias 为键，值为 {列: 值} 或 None（外键为空 / 关联行不存在）。
    """

    alias: str
    table: str
    column: str
    remote_column: str
    columns: tuple[str, ...]
