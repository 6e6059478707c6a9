from PyQt5.QtWidgets import QGridLayout, QHBoxLayout, QInputDialog, QMessageBox, QVBoxLayout, QWidget

from bst.bst_model import BSTModel
from core.base_ctrl import StructureController
from core.global_ctrl import GlobalController
from core.tree_view import TreeView


class BSTController(StructureController):
    """
    构建 BST 操作面板，并负责模型与视图之间的桥接。
    """

    def __init__(self, global_ctrl: GlobalController):
        super().__init__(global_ctrl)
        self.model = BSTModel()
        self.view = TreeView(global_ctrl)

        self._build_inputs()
        self.panel = self._create_panel()

        self._bind_view()
        self.view.deleteRequested.connect(self._handle_delete_from_view)
        self.view.findRequested.connect(self._handle_find_from_view)
        self.view.searchFinished.connect(self._on_search_finished)

        self._refresh_inputs()

    # ---------- UI 构建 ----------
    def _build_inputs(self):
        self.insert_value_edit = self._line_edit("Value", self._on_insert)
        self.delete_value_edit = self._line_edit("Value", self._on_delete)
        self.find_value_edit = self._line_edit("Value", self._on_find)

    def _create_panel(self):
        container = QWidget()
        outer = QVBoxLayout(container)
        outer.setContentsMargins(0, 0, 0, 0)
        layout = QGridLayout()
        layout.setHorizontalSpacing(12)
        layout.setVerticalSpacing(12)
        layout.setColumnStretch(0, 1)
        layout.setColumnStretch(1, 1)

        self.create_btn = self._button("Create From List", self._on_create)
        self.insert_btn = self._button("Insert", self._on_insert)
        self.delete_btn = self._button("Delete", self._on_delete)
        self.find_btn = self._button("Find", self._on_find)
        self.inorder_btn = self._button("In-order", self._on_show_inorder)

        layout.addWidget(self._single_button_group("Create", self.create_btn), 0, 0)
        layout.addWidget(self._form_group("Insert", [("Value:", self.insert_value_edit)], self.insert_btn), 1, 0)
        layout.addWidget(self._form_group("Delete", [("Value:", self.delete_value_edit)], self.delete_btn), 2, 0)
        layout.addWidget(self._form_group("Find", [("Value:", self.find_value_edit)], self.find_btn), 0, 1, 2, 1)

        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        row_layout.addWidget(self.inorder_btn)
        layout.addWidget(self._single_button_group("Traverse", row), 2, 1)

        outer.addLayout(layout)
        outer.addWidget(self.status_label)
        outer.addStretch(1)
        return container

    # ---------- 操作回调 ----------

    def _on_create(self):
        text, ok = QInputDialog.getText(self, "Create BST", "Enter values (comma-separated):")
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
        self.set_status(f"{len(self.model)} values, height {self.model.tree_height}")
        self._refresh_inputs()

    def _on_insert(self):
        value = self._read_value(self.insert_value_edit, "插入")
        if value is None:
            return
        inserted_id, path = self.model.insert(value)
        self.view.animate_insert(self.model.snapshot(), inserted_id, path)
        self.set_status(f"height {self.model.tree_height}")
        self._refresh_inputs()

    def _on_delete(self):
        if self.model.length == 0:
            return
        value = self._read_value(self.delete_value_edit, "删除")
        if value is None:
            return
        removed_id, path = self.model.delete(value)
        snapshot = self.model.snapshot()
        if removed_id is None:
            self.view.animate_find(snapshot, None, path)
        else:
            self.view.animate_delete(snapshot, removed_id, path)
        self._refresh_inputs()

    def _on_find(self):
        if self.model.length == 0:
            return
        value = self._read_value(self.find_value_edit, "查找")
        if value is None:
            return
        found_id, path = self.model.find(value)
        self.view.animate_find(self.model.snapshot(), found_id, path)

    def _on_show_inorder(self):
        values = ", ".join(str(v) for v in self.model.in_order())
        self.set_status(f"in-order: [{values}]")

    def _on_search_finished(self, found):
        if not found:
            self.set_status("未找到目标值。")

    def _handle_delete_from_view(self, node_id):
        value = self.model.value_of(node_id)
        if value is None:
            return
        self.delete_value_edit.setText(str(value))
        self._on_delete()

    def _handle_find_from_view(self, node_id):
        value = self.model.value_of(node_id)
        if value is None:
            return
        self.find_value_edit.setText(str(value))
        self._on_find()

    # ---------- 状态管理 ----------

    def _read_value(self, edit, action):
        raw = self._require_value(edit, action)
        if raw is None:
            return None
        return self._coerce_or_warn(raw, action, self.coerce_number)

    def _refresh_inputs(self):
        has_nodes = self.model.length > 0
        state = self._panel_locked
        self.create_btn.setDisabled(state)
        self.insert_btn.setDisabled(state)
        self.insert_value_edit.setDisabled(state)

        for widget in (
            self.delete_btn,
            self.delete_value_edit,
            self.find_btn,
            self.find_value_edit,
        ):
            widget.setDisabled(state or not has_nodes)
        self.inorder_btn.setDisabled(not has_nodes)
