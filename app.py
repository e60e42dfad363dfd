"""
報名資料管理後台主應用程式
Registration Admin Dashboard
"""
import logging
import streamlit as st

from src.services.dashboard_service import ensure_dashboard_state
from src.ui.dashboard import render_dashboard

logger = logging.getLogger(__name__)


# Streamlit 頁面配置
st.set_page_config(
    page_title="報名資料管理後台",
    page_icon="📋",
    layout="wide",
    initial_sidebar_state="collapsed"
)


def configure_logging():
    """設定應用程式日誌格式。"""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def initialize_session_state():
    """初始化 session state 預設值。"""
    ensure_dashboard_state()


def apply_custom_css():
    """套用自訂 CSS 樣式。"""
    st.markdown("""
        <style>
        /* 全域樣式 */
        .stApp {
            background: linear-gradient(135deg, #0f0c29 0%, #1a1a2e 50%, #16213e 100%);
        }

        /* 隱藏 Streamlit 預設元素 */
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}
        header, [data-testid="stHeader"] {
            visibility: hidden;
            height: 0;
        }

        [data-testid="stAppViewContainer"] > .main .block-container {
            padding-top: 1.5rem;
        }

        /* 按鈕樣式 */
        .stButton > button {
            border-radius: 12px;
            font-weight: 600;
            border: none;
        }

        .stButton > button[kind="primary"] {
            background: linear-gradient(135deg, #10b981 0%, #059669 100%);
            color: white;
        }

        /* 輸入框樣式 */
        .stTextInput > div > div > input {
            background: #16213e;
            border: 1px solid #2d3748;
            border-radius: 8px;
            color: #f1f5f9;
        }

        /* 錯誤訊息 */
        .stError {
            background: #ef444450;
            border-left: 4px solid #ef4444;
            border-radius: 8px;
            color: #fee2e2;
        }

        /* 警告訊息 */
        .stWarning {
            background: #f59e0b50;
            border-left: 4px solid #f59e0b;
            border-radius: 8px;
            color: #fef3c7;
        }
        </style>
    """, unsafe_allow_html=True)


def render_current_page():
    """渲染儀表板並提供錯誤邊界。"""
    try:
        render_dashboard()
    except Exception as e:
        # 錯誤邊界
        logger.exception("Unhandled exception while rendering dashboard")
        st.error("發生錯誤，請稍後再試")

        with st.expander("🔍 錯誤詳情"):
            st.code(str(e))


def main():
    """主應用程式入口。"""
    try:
        configure_logging()
        initialize_session_state()
        apply_custom_css()
        render_current_page()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("應用程式發生錯誤，請重新整理頁面")
        st.code(str(e))

        # 嘗試重置狀態
        if st.button("🔄 重新整理"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
