from PyQt5.QtWidgets import QInputDialog, QMessageBox, QVBoxLayout, QWidget

from core.base_ctrl import StructureController
from core.tree_view import TreeView
from heap.heap_model import HeapModel


def heap_badge(info):
    return f"[{info['index']}]"


class HeapController(StructureController):
    """Max-heap panel; the heap is drawn as the complete tree its array encodes."""

    def __init__(self, global_ctrl):
        super().__init__(global_ctrl)
        self.model = HeapModel()
        self.view = TreeView(global_ctrl, badge_formatter=heap_badge)

        self.insert_value_edit = self._line_edit("Value", self._on_insert)
        self.panel = self._create_panel()
        self._bind_view()
        self._refresh_inputs()

    def _create_panel(self):
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        self.create_btn = self._button("Create From List", self._on_create)
        self.insert_btn = self._button("Insert", self._on_insert)
        self.extract_btn = self._button("Extract Max", self._on_extract)

        layout.addWidget(self._single_button_group("Create", self.create_btn))
        layout.addWidget(self._form_group("Insert", [("Value:", self.insert_value_edit)], self.insert_btn))
        layout.addWidget(self._single_button_group("Extract", self.extract_btn))
        layout.addWidget(self.status_label)
        layout.addStretch(1)
        return container

    def _on_create(self):
        text, ok = QInputDialog.getText(self, "Create Heap", "Enter values (comma-separated):")
        if not ok:
            return
        try:
            values = self._parse_sequence(text, self.coerce_number)
        except ValueError:
            QMessageBox.warning(self, "Invalid Value", "创建列表中每个元素都必须是数值。")
            return
        self.model.create_from_iterable(values)
        snapshot = self.model.snapshot()
        if snapshot["nodes"]:
            self.view.animate_build(snapshot)
        else:
            self.view.reset()
        self._show_array()
        self._refresh_inputs()

    def _on_insert(self):
        raw = self._require_value(self.insert_value_edit, "插入")
        if raw is None:
            return
        value = self._coerce_or_warn(raw, "插入", self.coerce_number)
        if value is None:
            return
        new_id, swapped = self.model.insert(value)
        self.view.animate_insert(self.model.snapshot(), new_id, swapped)
        self.insert_value_edit.clear()
        self._show_array()
        self._refresh_inputs()

    def _on_extract(self):
        if self.model.is_empty():
            QMessageBox.information(self, "Heap", "Heap is empty.")
            return
        top, swapped = self.model.extract_max()
        self.view.animate_delete(self.model.snapshot(), top["id"], [], swapped)
        self._show_array(f"extracted {top['value']}")
        self._refresh_inputs()

    def _show_array(self, prefix=""):
        array = ", ".join(str(v) for v in self.model.values())
        text = f"array: [{array}]"
        self.set_status(f"{prefix}; {text}" if prefix else text)

    def _refresh_inputs(self):
        state = self._panel_locked
        self.create_btn.setDisabled(state)
        self.insert_btn.setDisabled(state)
        self.insert_value_edit.setDisabled(state)
        self.extract_btn.setDisabled(state or self.model.is_empty())
