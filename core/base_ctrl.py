import logging
import re
from typing import Callable, List, Optional

from PyQt5.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

logger = logging.getLogger(__name__)


class StructureController(QWidget):
    """
    控制器基类：构建操作面板、解析输入，并在动画运行期间锁定按钮。
    子类负责创建 self.model / self.view 并实现 _refresh_inputs。
    """

    def __init__(self, global_ctrl):
        super().__init__()
        self.global_ctrl = global_ctrl
        self.panel_index = -1
        self._panel_locked = False
        self.status_label = QLabel("")
        self.status_label.setObjectName("structureStatus")
        self.status_label.setWordWrap(True)

    def _bind_view(self):
        self.view.interactionLocked.connect(self._on_lock_state)
        self.view.clearAllRequested.connect(self._on_clear_all_requested)

    def build_panel(self):
        return self.panel

    # ---------- 生命周期 ----------

    def on_activate(self, graphics_view):
        self.view.bind_canvas(graphics_view)
        self.view.auto_fit_view()

    def on_deactivate(self):
        pass

    # ---------- Panel helpers ----------

    @staticmethod
    def _single_button_group(title, button):
        group = QGroupBox(title)
        group.setStyleSheet("QGroupBox { color: white; }")
        vlayout = QVBoxLayout(group)
        vlayout.setContentsMargins(12, 10, 12, 12)
        vlayout.setSpacing(6)
        vlayout.addWidget(button)
        return group

    @staticmethod
    def _form_group(title, rows, button):
        group = QGroupBox(title)
        group.setStyleSheet("QGroupBox { color: white; }")
        form = QFormLayout()
        form.setContentsMargins(12, 8, 12, 12)
        form.setSpacing(6)
        for label, widget in rows:
            form.addRow(label, widget)
        form.addRow(button)
        group.setLayout(form)
        return group

    @staticmethod
    def _line_edit(placeholder="Value", on_return=None):
        edit = QLineEdit()
        edit.setPlaceholderText(placeholder)
        if on_return:
            edit.returnPressed.connect(on_return)
        return edit

    @staticmethod
    def _button(text, on_click):
        button = QPushButton(text)
        button.clicked.connect(on_click)
        return button

    def set_status(self, text: str):
        self.status_label.setText(text)

    # ---------- 输入解析 ----------

    def _require_value(self, edit: QLineEdit, action: str) -> Optional[str]:
        raw = edit.text().strip()
        if not raw:
            QMessageBox.warning(self, "Missing Value", f"请先输入要{action}的值。")
            return None
        return raw

    def _coerce_or_warn(self, raw: str, action: str, coerce: Callable):
        try:
            return coerce(raw)
        except ValueError:
            logger.info("rejected %s input %r", action, raw)
            QMessageBox.warning(self, "Invalid Value", f"{action}的值格式不正确：{raw}")
            return None

    @staticmethod
    def _parse_sequence(text: str, coerce: Callable) -> List:
        if not text:
            return []
        normalized = text.replace("，", ",")
        tokens = [part.strip() for part in re.split(r"[,\s]+", normalized) if part.strip()]
        return [coerce(tok) for tok in tokens]

    @staticmethod
    def coerce_int(value):
        return int(str(value).strip())

    @staticmethod
    def coerce_number(value):
        try:
            return int(value)
        except ValueError:
            pass
        return float(value)

    @staticmethod
    def coerce_any(value):
        try:
            return StructureController.coerce_number(value)
        except ValueError:
            return value

    # ---------- 状态管理 ----------

    def _refresh_inputs(self):
        pass

    def _on_lock_state(self, locked):
        self._panel_locked = locked
        self._refresh_inputs()

    def _on_clear_all_requested(self):
        self.model.clear()
        self.view.reset()
        self.set_status("")
        self._refresh_inputs()
