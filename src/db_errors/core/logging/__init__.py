# src/db_errors/core/logging/
# ├─ __init__.py            # public API: setup_logging, make_dict_config
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # DialectFilter, RedactFilter
# └─ handlers.py            # handler config factories (console / rotating files)


from .builder import setup_logging, make_dict_config
from .filters import DialectFilter, RedactFilter

__all__ = ["setup_logging", "make_dict_config", "DialectFilter", "RedactFilter"]
