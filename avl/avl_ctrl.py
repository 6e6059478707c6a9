import logging

from PyQt5.QtWidgets import QGridLayout, QHBoxLayout, QInputDialog, QMessageBox, QVBoxLayout, QWidget

from avl.avl_model import AVLModel
from core.base_ctrl import StructureController
from core.global_ctrl import GlobalController
from core.tree_view import TreeView

logger = logging.getLogger(__name__)


def avl_badge(info):
    return f"h{info['height']}  bf {info['balance']:+d}"


class AVLController(StructureController):
    """
    AVL 操作面板：插入/删除/查找/遍历，并在状态栏里说明每次发生的旋转。
    """

    def __init__(self, global_ctrl: GlobalController):
        super().__init__(global_ctrl)
        self.model = AVLModel()
        self.view = TreeView(global_ctrl, badge_formatter=avl_badge)

        self._build_inputs()
        self.panel = self._create_panel()

        self._bind_view()
        self.view.deleteRequested.connect(self._handle_delete_from_view)
        self.view.findRequested.connect(self._handle_find_from_view)
        self.view.searchFinished.connect(self._on_search_finished)

        self._refresh_inputs()

    # ---------- UI 构建 ----------

    def _build_inputs(self):
        self.insert_value_edit = self._line_edit("Integer key", self._on_insert)
        self.delete_value_edit = self._line_edit("Integer key", self._on_delete)
        self.find_value_edit = self._line_edit("Integer key", self._on_find)

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

        layout.addWidget(self._single_button_group("Create", self.create_btn), 0, 0)
        layout.addWidget(self._form_group("Insert", [("Key:", self.insert_value_edit)], self.insert_btn), 1, 0)
        layout.addWidget(self._form_group("Delete", [("Key:", self.delete_value_edit)], self.delete_btn), 2, 0)
        layout.addWidget(self._form_group("Find", [("Key:", self.find_value_edit)], self.find_btn), 0, 1, 2, 1)

        traversal = QWidget()
        row = QHBoxLayout(traversal)
        row.setContentsMargins(0, 0, 0, 0)
        self.traversal_btns = []
        for label, order in (("In", "in"), ("Pre", "pre"), ("Post", "post")):
            btn = self._button(label, lambda _checked=False, o=order: self._on_traverse(o))
            self.traversal_btns.append(btn)
            row.addWidget(btn)
        layout.addWidget(self._single_button_group("Traverse", traversal), 2, 1)

        outer.addLayout(layout)
        outer.addWidget(self.status_label)
        outer.addStretch(1)
        return container

    # ---------- 操作回调 ----------

    def _on_create(self):
        text, ok = QInputDialog.getText(self, "Create AVL Tree", "Enter integer keys (comma-separated):")
        if not ok:
            return
        try:
            keys = self._parse_sequence(text, self.coerce_int)
        except ValueError:
            logger.info("rejected AVL key list %r", text)
            QMessageBox.warning(self, "Invalid Value", "AVL 的键必须是整数。")
            return
        self.build_from(keys)

    def build_from(self, keys):
        self.model.create_from_iterable(keys)
        snapshot = self.model.snapshot()
        if snapshot["nodes"]:
            self.view.animate_build(snapshot)
        else:
            self.view.reset()
        self.set_status(f"{len(self.model)} keys, height {self.model.tree_height}")
        self._refresh_inputs()

    def _on_insert(self):
        key = self._read_key(self.insert_value_edit, "插入")
        if key is None:
            return
        node_id, path, rotations = self.model.insert(key)
        self.view.animate_insert(
            self.model.snapshot(), node_id, path, [r["pivot"] for r in rotations]
        )
        self.set_status(self._describe("insert", key, rotations, duplicate=node_id in path))
        self._refresh_inputs()

    def _on_delete(self):
        if self.model.length == 0:
            return
        key = self._read_key(self.delete_value_edit, "删除")
        if key is None:
            return
        removed_id, path, rotations = self.model.delete(key)
        snapshot = self.model.snapshot()
        if removed_id is None:
            self.view.animate_find(snapshot, None, path)
            self.set_status(f"delete {key}: not present, tree unchanged")
        else:
            pivots = [r["pivot"] for r in rotations if r["pivot"] != removed_id]
            self.view.animate_delete(snapshot, removed_id, path, pivots)
            self.set_status(self._describe("delete", key, rotations))
        self._refresh_inputs()

    def _on_find(self):
        if self.model.length == 0:
            return
        key = self._read_key(self.find_value_edit, "查找")
        if key is None:
            return
        found_id, path = self.model.find(key)
        self.view.animate_find(self.model.snapshot(), found_id, path)

    def _on_traverse(self, order):
        walk = {
            "in": self.model.in_order,
            "pre": self.model.pre_order,
            "post": self.model.post_order,
        }[order]
        keys = ", ".join(str(key) for key in walk())
        self.set_status(f"{order}-order: [{keys}]")

    def _on_search_finished(self, found):
        if not found:
            self.set_status("未找到目标值。")

    def _handle_delete_from_view(self, node_id):
        key = self.model.value_of(node_id)
        if key is None:
            return
        self.delete_value_edit.setText(str(key))
        self._on_delete()

    def _handle_find_from_view(self, node_id):
        key = self.model.value_of(node_id)
        if key is None:
            return
        self.find_value_edit.setText(str(key))
        self._on_find()

    # ---------- Helpers ----------

    def _read_key(self, edit, action):
        raw = self._require_value(edit, action)
        if raw is None:
            return None
        return self._coerce_or_warn(raw, action, self.coerce_int)

    def _describe(self, verb, key, rotations, duplicate=False):
        if duplicate:
            return f"{verb} {key}: already present, tree unchanged"
        if not rotations:
            return f"{verb} {key}: balanced, no rotation"
        steps = ", ".join(f"{r['case']} at {r['key']}" for r in rotations)
        return f"{verb} {key}: {steps} → root {self.model.root_key}"

    def _refresh_inputs(self):
        has_nodes = self.model.length > 0
        state = self._panel_locked
        self.create_btn.setDisabled(state)
        self.insert_btn.setDisabled(state)
        self.insert_value_edit.setDisabled(state)
        for widget in (self.delete_btn, self.delete_value_edit, self.find_btn, self.find_value_edit):
            widget.setDisabled(state or not has_nodes)
        for btn in self.traversal_btns:
            btn.setDisabled(not has_nodes)
