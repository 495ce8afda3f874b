import os
from dotenv import load_dotenv

load_dotenv()

# API Keys and Config - loaded from .env
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "60"))
EXPORT_DIR = os.getenv("EXPORT_DIR", ".")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Sampling temperature per extraction mode
TEXT_MODE_TEMPERATURE = 0.1
URL_MODE_TEMPERATURE = 0.7  # creative simulation

# Provenance labels used when the model leaves rawContent blank
TEXT_PROVENANCE = "文本导入"
URL_PROVENANCE_PREFIX = "爬取自: "

# Category sentinel meaning "no category constraint"
CATEGORY_ALL = "所有类目"

PRODUCT_CATEGORIES = [
    CATEGORY_ALL,
    "女装服饰",
    "男装服饰",
    "美妆个护",
    "3C数码",
    "家居百货",
    "鞋包配饰",
    "运动户外",
    "母婴玩具",
    "食品饮料",
]

PROXY_REGIONS = [
    "自动 (Auto)",
    "美国 (US - Residential)",
    "英国 (UK)",
    "东南亚 (SEA)",
    "中国 (CN)",
]

# Export
EXPORT_FILENAME_PREFIX = "TikTok数据_"
EXPORT_SHEET_NAME = "商品数据"

# Scripted crawl delays in seconds (time spent in each state before moving on)
CRAWL_STEP_DELAYS = {
    "connecting": 0.8,
    "challenge": 1.2,
    "rendering": 1.5,
}
