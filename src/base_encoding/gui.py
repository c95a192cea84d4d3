import sys
from typing import Optional

from PyQt5 import QtWidgets

from .config import CodecConfig, load_config, save_config
from .engine import BaseEncoding
from .errors import BaseEncodingError
from .history import log_event
from .registry import custom_encoding, lookup, normalize_name, registry
from .utils import decode_bytes_best_effort, unescape


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, config: Optional[CodecConfig] = None) -> None:
        super().__init__()
        self.setWindowTitle("RFC 4648 编解码")
        self.resize(800, 500)
        self.config = config or load_config()
        self.setCentralWidget(self._build_codec_tab())

    def _build_codec_tab(self) -> QtWidgets.QWidget:
        widget = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(widget)

        self.input_edit = QtWidgets.QTextEdit()
        self.output_edit = QtWidgets.QTextEdit()
        self.output_edit.setReadOnly(True)

        self.variant_combo = QtWidgets.QComboBox()
        self.variant_combo.addItems(list(registry().keys()))
        self.variant_combo.setCurrentText(normalize_name(self.config.variant))
        # A custom alphabet overrides the combo box.
        self.alphabet_edit = QtWidgets.QLineEdit(self.config.alphabet)
        self.alphabet_edit.setPlaceholderText("自定义字母表（可选）")

        self.no_padding_check = QtWidgets.QCheckBox("无填充")
        self.no_padding_check.setChecked(self.config.omit_padding)
        self.ignore_check = QtWidgets.QCheckBox("忽略未知字符")
        self.ignore_check.setChecked(self.config.ignore_unknown)
        self.hex_check = QtWidgets.QCheckBox("解码输出 Hex")

        self.separator_edit = QtWidgets.QLineEdit(self.config.separator.encode("unicode_escape").decode("ascii"))
        self.separator_edit.setPlaceholderText("分隔符，如 \\n")
        self.interval_spin = QtWidgets.QSpinBox()
        self.interval_spin.setRange(0, 10000)
        self.interval_spin.setValue(self.config.interval)

        encode_btn = QtWidgets.QPushButton("编码")
        encode_btn.clicked.connect(lambda: self._run_codec("encode"))
        decode_btn = QtWidgets.QPushButton("解码")
        decode_btn.clicked.connect(lambda: self._run_codec("decode"))
        save_btn = QtWidgets.QPushButton("保存设置")
        save_btn.clicked.connect(self._save_settings)
        self.encode_btn = encode_btn
        self.decode_btn = decode_btn

        op_layout = QtWidgets.QHBoxLayout()
        op_layout.addWidget(QtWidgets.QLabel("Base类型"))
        op_layout.addWidget(self.variant_combo)
        op_layout.addWidget(self.alphabet_edit)
        op_layout.addWidget(self.no_padding_check)
        op_layout.addWidget(self.ignore_check)
        op_layout.addWidget(QtWidgets.QLabel("分隔符"))
        op_layout.addWidget(self.separator_edit)
        op_layout.addWidget(QtWidgets.QLabel("间隔"))
        op_layout.addWidget(self.interval_spin)
        op_layout.addWidget(self.hex_check)
        op_layout.addWidget(encode_btn)
        op_layout.addWidget(decode_btn)
        op_layout.addWidget(save_btn)

        layout.addLayout(op_layout)
        layout.addWidget(QtWidgets.QLabel("输入"))
        layout.addWidget(self.input_edit, 3)
        layout.addWidget(QtWidgets.QLabel("输出"))
        layout.addWidget(self.output_edit, 3)
        return widget

    def _current_encoding(self) -> BaseEncoding:
        symbols = self.alphabet_edit.text()
        if symbols:
            encoding = custom_encoding(symbols, case_sensitive=self.config.case_sensitive)
        else:
            encoding = lookup(self.variant_combo.currentText())
        if self.no_padding_check.isChecked():
            encoding = encoding.without_padding()
        if self.ignore_check.isChecked():
            encoding = encoding.ignore_unknown_characters()
        separator = unescape(self.separator_edit.text())
        if separator:
            encoding = encoding.with_separator(separator, self.interval_spin.value())
        return encoding

    def _run_codec(self, mode: str) -> None:
        text = self.input_edit.toPlainText()
        try:
            encoding = self._current_encoding()
            if mode == "encode":
                output = encoding.encode(text.encode("utf-8"))
            else:
                decoded = encoding.decode(text)
                output = decoded.hex() if self.hex_check.isChecked() else decode_bytes_best_effort(decoded)
        except BaseEncodingError as exc:
            output = f"错误: {exc}"
        self.output_edit.setPlainText(output)
        if self.config.history:
            log_event(
                action=f"gui_{mode}",
                payload={
                    "variant": "custom" if self.alphabet_edit.text() else self.variant_combo.currentText(),
                    "input_size": len(text),
                },
            )

    def _save_settings(self) -> None:
        self.config.variant = self.variant_combo.currentText()
        self.config.alphabet = self.alphabet_edit.text()
        self.config.omit_padding = self.no_padding_check.isChecked()
        self.config.ignore_unknown = self.ignore_check.isChecked()
        self.config.separator = unescape(self.separator_edit.text())
        self.config.interval = self.interval_spin.value()
        try:
            self.config.build()
            save_config(self.config)
            QtWidgets.QMessageBox.information(self, "设置", "保存成功")
        except (BaseEncodingError, OSError) as exc:  # pragma: no cover - GUI feedback
            QtWidgets.QMessageBox.warning(self, "设置", f"保存失败: {exc}")


def run_gui() -> None:
    app = QtWidgets.QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    run_gui()
