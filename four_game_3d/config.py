import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "FOUR3D_"


class Settings(BaseModel):
    # 探索は 4 手まで、空きマス 16 以下のときだけ
    search_depth: int = Field(default=4, ge=1, le=8)
    search_max_empty: int = Field(default=16, ge=0, le=64)
    # このライン数以上が通るマスを「好所」とみなす
    strategic_min_lines: int = Field(default=4, ge=0)
    ai_seed: Optional[int] = None
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return v

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """FOUR3D_* 環境変数から読む。未設定の項目はデフォルト"""
        env = os.environ if environ is None else environ
        data = {}
        for name in cls.model_fields:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip() != "":
                data[name] = raw.strip()
        return cls(**data)


settings = Settings.from_env()
