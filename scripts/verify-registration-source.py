#!/usr/bin/env python3
"""
Registration Source Verification Script
驗證報名資料來源設定是否正確
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.models.view_state import ViewState  # noqa: E402
from src.services.record_source import create_record_source  # noqa: E402
from src.services.view_projector import project_view  # noqa: E402
from src.utils.exceptions import RegistrationFetchError  # noqa: E402
from src.utils.settings import SOURCE_REMOTE, get_settings  # noqa: E402


def check_dependencies():
    """Check if required packages are installed"""
    print("🔍 檢查相依套件...")

    required = [
        ("streamlit", "Streamlit"),
        ("requests", "Requests"),
    ]

    all_installed = True
    for module, name in required:
        try:
            __import__(module)
            print(f"   ✅ {name}")
        except ImportError:
            print(f"   ❌ {name} 未安裝")
            all_installed = False

    return all_installed


def check_settings():
    """Check registration source settings"""
    print("\n🔍 檢查資料來源設定...")

    try:
        settings = get_settings()
    except ValueError as e:
        print(f"   ❌ 設定錯誤：{e}")
        return None

    if settings.source == SOURCE_REMOTE:
        print(f"   ✅ 遠端來源：{settings.api_url}{settings.api_path}（逾時 {settings.api_timeout}s）")
    else:
        print(f"   ✅ 本機資料：{settings.fixture_path or '內建示範資料'}")
    return settings


def check_fetch(settings):
    """Fetch registrations once and print counts"""
    print("\n🔍 測試讀取報名資料...")

    try:
        records = create_record_source(settings).fetch_all()
    except RegistrationFetchError as e:
        print(f"   ❌ 連線失敗：{e}")
        return False

    view = project_view(records, ViewState())
    print(f"   ✅ 總報名數 {view.total_count}（學生 {view.student_count}，專業人士 {view.professional_count}）")
    return True


def main():
    print("=" * 60)
    print("報名資料來源驗證工具")
    print("=" * 60)
    print()

    results = {"相依套件": check_dependencies()}

    settings = check_settings()
    results["資料來源設定"] = settings is not None
    results["讀取報名資料"] = check_fetch(settings) if settings else False

    print("\n" + "=" * 60)
    print("驗證結果摘要")
    print("=" * 60)

    for check_name, passed in results.items():
        status = "✅ 通過" if passed else "❌ 失敗"
        print(f"{check_name:20s} {status}")

    all_passed = all(results.values())

    print("\n" + "=" * 60)
    if all_passed:
        print("🎉 所有檢查通過！")
        print("\n下一步：")
        print("  1. 啟動應用: streamlit run app.py")
        print("  2. 本機測試: http://localhost:8501")
    else:
        print("⚠️  部分檢查未通過，請參考上述訊息進行修正")
    print("=" * 60)

    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
