from pathlib import Path
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent

class DemoDefaults(BaseModel):
    quantile: float = 0.5
    kld_error: float = 0.1
    bin_size: float = 0.1
    min_samples: int = 10
    underlying_mean: float = 0.0
    underlying_var: float = 1.0
    seed: int = -1

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="KLD_", env_nested_delimiter="__")

    ztable_path: Path = PROJECT_ROOT / "kld_sampling" / "stats" / "ztable.data"
    ztable_step: float = 0.01
    ztable_max_z: float = 4.09
    ztable_decimals: int = 5
    absolute_min_samples: int = 10
    max_confidence: float = 0.49998
    fallback_zvalue: float = 4.1
    max_quantile: float = 0.99998
    log_level: str = "WARNING"
    demo: DemoDefaults = DemoDefaults()

settings = Settings()
