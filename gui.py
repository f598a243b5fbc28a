"""
GUI for SmartCalc
Tkinter phone-style calculator with an AI word-problem mode
"""
import tkinter as tk
from tkinter import ttk
import json
import logging
import threading

import config
from calculator import Operation
from session_manager import CalculatorMode, CalculatorSession, SolveInProgressError
from smart_solver import SolverError

logger = logging.getLogger(__name__)

# Keypad layout: (label, action, kind, column span)
KEYPAD_ROWS = [
    [("AC", "clear", "modifier", 1), ("+/-", "sign", "modifier", 1),
     ("%", Operation.PERCENT, "modifier", 1), ("÷", Operation.DIVIDE, "operator", 1)],
    [("7", "7", "digit", 1), ("8", "8", "digit", 1), ("9", "9", "digit", 1),
     ("×", Operation.MULTIPLY, "operator", 1)],
    [("4", "4", "digit", 1), ("5", "5", "digit", 1), ("6", "6", "digit", 1),
     ("−", Operation.SUBTRACT, "operator", 1)],
    [("1", "1", "digit", 1), ("2", "2", "digit", 1), ("3", "3", "digit", 1),
     ("+", Operation.ADD, "operator", 1)],
    [("0", "0", "digit", 2), (".", ".", "digit", 1), ("=", "equal", "operator", 1)],
]


class SmartCalcGUI:
    def __init__(self, root, session=None):
        self.root = root
        self.root.title(config.APP_NAME)
        self.root.geometry(f"{config.WINDOW_WIDTH}x{config.WINDOW_HEIGHT}")

        self.session = session if session is not None else CalculatorSession()

        # ── Theme state (load before any widget is created) ───────────────
        settings = self._load_settings()
        self.dark_mode: bool = settings.get("dark_mode", True)
        self.T: dict = config.get_theme(self.dark_mode)
        self.root.configure(bg=self.T["bg"])

        self._op_buttons = {}
        self._pending_request = None
        self._pending_explain = None

        self.create_widgets()
        self.refresh()
        self.root.bind('<Key>', self.on_key_press)

    # ── Settings persistence ─────────────────────────────────────────────
    def _load_settings(self):
        try:
            with open(config.SETTINGS_FILE, "r") as f:
                return json.load(f)
        except (OSError, ValueError):
            return {}

    def _save_settings(self, data):
        existing = self._load_settings()
        existing.update(data)
        with open(config.SETTINGS_FILE, "w") as f:
            json.dump(existing, f, indent=2)

    def _toggle_dark_mode(self):
        """Persist dark_mode setting and rebuild the widgets in the new palette."""
        self.dark_mode = not self.dark_mode
        self._save_settings({"dark_mode": self.dark_mode})
        self.T = config.get_theme(self.dark_mode)
        self.root.configure(bg=self.T["bg"])
        for w in self.root.winfo_children():
            w.destroy()
        self._op_buttons = {}
        self.create_widgets()
        self.refresh()

    # ── Widget helpers ───────────────────────────────────────────────────
    def _key_btn(self, parent, text, command=None, kind="digit", **kw):
        """Create a flat round-ish keypad button."""
        T = self.T
        if kind == "operator":
            bg, fg = T["operator_bg"], T["operator_fg"]
        elif kind == "modifier":
            bg, fg = T["modifier_bg"], T["modifier_fg"]
        elif kind == "smart":
            bg, fg = T["smart_bg"], T["smart_fg"]
        else:
            bg, fg = T["digit_bg"], T["digit_fg"]
        return tk.Button(
            parent, text=text, command=command,
            font=kw.pop("font", config.BUTTON_FONT),
            bg=bg, fg=fg,
            activebackground=T["bg_dark"], activeforeground=fg,
            relief=tk.FLAT, bd=0, cursor="hand2",
            highlightthickness=0,
            **kw
        )

    def _show_toast(self, msg, kind="error", duration=3000):
        """Show an inline toast banner at the top of the window."""
        T = self.T
        bg = {"error": T["danger"], "success": T["success"]}.get(kind, T["warning"])
        toast = tk.Frame(self.root, bg=bg)
        toast.place(relx=0.05, y=60, relwidth=0.9, height=42)
        toast.lift()
        icon = "✗" if kind == "error" else "ℹ"
        tk.Label(toast, text=f"  {icon}  {msg}",
                 font=(config.LABEL_FONT[0], 9, "bold"),
                 bg=bg, fg="#FFFFFF", anchor="w", wraplength=300,
                 justify=tk.LEFT).pack(side=tk.LEFT, fill=tk.X, expand=True)
        tk.Button(toast, text="✕", font=(config.LABEL_FONT[0], 8),
                  bg=bg, fg="#FFFFFF", relief=tk.FLAT, bd=0,
                  command=toast.destroy, cursor="hand2",
                  activebackground=bg).pack(side=tk.RIGHT, padx=4)
        self.root.after(duration, lambda: toast.destroy() if toast.winfo_exists() else None)

    # ── Layout ───────────────────────────────────────────────────────────
    def create_widgets(self):
        """Create main UI components"""
        T = self.T

        # Top bar: history toggle, mode toggle, theme toggle
        self.top_frame = tk.Frame(self.root, bg=T["bg"], height=50)
        self.top_frame.pack(fill=tk.X, padx=12, pady=(10, 2))

        self.history_btn = tk.Button(
            self.top_frame, text="⏱ History", font=config.LABEL_FONT,
            bg=T["bg_dark"], fg=T["subtext"], relief=tk.FLAT, bd=0,
            cursor="hand2", command=self.on_toggle_history)
        self.history_btn.pack(side=tk.LEFT, ipadx=8, ipady=4)

        tk.Button(
            self.top_frame, text="☾", font=config.LABEL_FONT,
            bg=T["bg_dark"], fg=T["subtext"], relief=tk.FLAT, bd=0,
            cursor="hand2", command=self._toggle_dark_mode
        ).pack(side=tk.RIGHT, padx=(6, 0), ipadx=6, ipady=4)

        self.mode_btn = tk.Button(
            self.top_frame, text="", font=(config.LABEL_FONT[0], 10, "bold"),
            relief=tk.FLAT, bd=0, cursor="hand2", command=self.on_toggle_mode)
        self.mode_btn.pack(side=tk.RIGHT, ipadx=10, ipady=4)

        # Display area
        self.display_frame = tk.Frame(self.root, bg=T["bg"])
        self.display_frame.pack(fill=tk.BOTH, expand=True, padx=16)

        self.explanation_label = tk.Label(
            self.display_frame, text="", font=config.LABEL_FONT,
            bg=T["explain_bg"], fg=T["explain_fg"], justify=tk.LEFT,
            anchor=tk.W, wraplength=config.WINDOW_WIDTH - 60, padx=12, pady=10)

        self.display = tk.Label(
            self.display_frame, text="0", font=config.DISPLAY_FONT,
            bg=T["bg"], fg=T["display_fg"], anchor=tk.E)
        self.display.pack(side=tk.BOTTOM, fill=tk.X)

        self.expression_label = tk.Label(
            self.display_frame, text="", font=config.EXPRESSION_FONT,
            bg=T["bg"], fg=T["subtext"], anchor=tk.E)
        self.expression_label.pack(side=tk.BOTTOM, fill=tk.X)

        # Interaction area: keypad or smart prompt
        self.content_frame = tk.Frame(self.root, bg=T["bg"])
        self.content_frame.pack(fill=tk.X, padx=12, pady=(6, 18))

        self.keypad_frame = self._build_keypad(self.content_frame)
        self.smart_frame = self._build_smart_panel(self.content_frame)

        # History overlay (placed over everything when visible)
        self.history_frame = tk.Frame(self.root, bg=T["bg"])

    def _build_keypad(self, parent):
        T = self.T
        frame = tk.Frame(parent, bg=T["bg"])
        for c in range(4):
            frame.grid_columnconfigure(c, weight=1, uniform="key")
        for r, row in enumerate(KEYPAD_ROWS):
            frame.grid_rowconfigure(r, weight=1)
            col = 0
            for label, action, kind, span in row:
                btn = self._key_btn(frame, label, kind=kind,
                                    command=lambda a=action: self.on_key(a))
                btn.grid(row=r, column=col, columnspan=span, sticky="nsew",
                         padx=5, pady=5, ipady=14)
                if label == "AC":
                    self.clear_btn = btn
                if isinstance(action, Operation) and kind == "operator":
                    self._op_buttons[action] = btn
                col += span
        return frame

    def _build_smart_panel(self, parent):
        T = self.T
        frame = tk.Frame(parent, bg=T["bg"])

        self.prompt_text = tk.Text(
            frame, height=7, wrap=tk.WORD, font=(config.LABEL_FONT[0], 13),
            bg=T["entry_bg"], fg=T["entry_fg"], insertbackground=T["entry_fg"],
            relief=tk.FLAT, bd=0, padx=14, pady=12)
        self.prompt_text.pack(fill=tk.X, pady=(0, 8))
        self.prompt_text.bind("<KeyRelease>", lambda e: self._refresh_solve_button())

        actions = tk.Frame(frame, bg=T["bg"])
        actions.pack(fill=tk.X)
        tk.Button(actions, text="⟳", font=config.LABEL_FONT,
                  bg=T["bg_dark"], fg=T["subtext"], relief=tk.FLAT, bd=0,
                  cursor="hand2", command=self.on_reset_prompt
                  ).pack(side=tk.LEFT, ipadx=10, ipady=10)
        self.solve_btn = self._key_btn(
            actions, "Solve with AI", kind="smart",
            font=(config.LABEL_FONT[0], 13, "bold"), command=self.on_solve)
        self.solve_btn.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(8, 0), ipady=10)
        self.explain_btn = self._key_btn(
            actions, "Explain last", kind="modifier",
            font=(config.LABEL_FONT[0], 11), command=self.on_explain)
        self.explain_btn.pack(side=tk.LEFT, padx=(8, 0), ipadx=6, ipady=10)
        return frame

    # ── Rendering ────────────────────────────────────────────────────────
    def refresh(self):
        """Re-render every widget from the session state"""
        T = self.T
        session = self.session
        state = session.calculator.state

        self.update_display(state.display)
        self.expression_label.config(text=state.expression_line)
        self.clear_btn.config(text=state.clear_label)

        for op, btn in self._op_buttons.items():
            if state.pending_operation is op and state.is_fresh_entry:
                btn.config(bg=T["active_bg"], fg=T["active_fg"])
            else:
                btn.config(bg=T["operator_bg"], fg=T["operator_fg"])

        smart = session.mode is CalculatorMode.SMART
        if smart:
            self.mode_btn.config(text="✨ AI Mode", bg=T["smart_bg"], fg=T["smart_fg"])
            self.keypad_frame.pack_forget()
            self.smart_frame.pack(fill=tk.X)
        else:
            self.mode_btn.config(text="Standard", bg=T["bg_dark"], fg=T["subtext"])
            self.smart_frame.pack_forget()
            self.keypad_frame.pack(fill=tk.X)
        self.mode_btn.config(state=tk.DISABLED if session.is_solving else tk.NORMAL)

        if session.explanation and smart:
            self.explanation_label.config(text=f"✨ {session.explanation}")
            self.explanation_label.pack(side=tk.BOTTOM, fill=tk.X, pady=(12, 0),
                                        before=self.display)
        else:
            self.explanation_label.pack_forget()

        self._refresh_solve_button()
        self.show_history_panel(session.show_history)

    def update_display(self, text):
        """Update the display, shrinking the font for long numbers"""
        size = config.DISPLAY_FONT[1]
        if len(text) > 9:
            size = 30
        elif len(text) > 6:
            size = 42
        self.display.config(text=text, font=(config.DISPLAY_FONT[0], size))

    def _refresh_solve_button(self):
        if self.session.is_solving:
            self.solve_btn.config(text="Analyzing Problem...", state=tk.DISABLED)
        elif not self.prompt_text.get("1.0", tk.END).strip():
            self.solve_btn.config(text="Solve with AI", state=tk.DISABLED)
        else:
            self.solve_btn.config(text="Solve with AI", state=tk.NORMAL)

    def show_history_panel(self, visible):
        """Show or hide the history overlay"""
        T = self.T
        for widget in self.history_frame.winfo_children():
            widget.destroy()
        if not visible:
            self.history_frame.place_forget()
            self.history_btn.config(text="⏱ History")
            return

        self.history_btn.config(text="‹ Back")
        self.history_frame.place(x=0, y=56, relwidth=1, relheight=1, height=-56)
        self.history_frame.lift()

        header = tk.Frame(self.history_frame, bg=T["bg"])
        header.pack(fill=tk.X, padx=20, pady=(10, 6))
        tk.Label(header, text="History", font=(config.LABEL_FONT[0], 20, "bold"),
                 bg=T["bg"], fg=T["display_fg"]).pack(side=tk.LEFT)
        tk.Button(header, text="\U0001f5d1", font=config.LABEL_FONT,
                  bg=T["bg"], fg=T["subtext"], relief=tk.FLAT, bd=0,
                  cursor="hand2", command=self.on_clear_history).pack(side=tk.RIGHT)

        records = self.session.history.list()
        if not records:
            tk.Label(self.history_frame, text="No history yet",
                     font=(config.LABEL_FONT[0], 14), bg=T["bg"],
                     fg=T["subtext"]).pack(expand=True)
            return

        canvas = tk.Canvas(self.history_frame, bg=T["bg"], highlightthickness=0, bd=0)
        scrollbar = ttk.Scrollbar(self.history_frame, orient=tk.VERTICAL, command=canvas.yview)
        inner = tk.Frame(canvas, bg=T["bg"])
        inner.bind("<Configure>", lambda e: canvas.configure(scrollregion=canvas.bbox("all")))
        window = canvas.create_window((0, 0), window=inner, anchor="nw")
        canvas.bind("<Configure>", lambda e: canvas.itemconfig(window, width=e.width))
        canvas.configure(yscrollcommand=scrollbar.set)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(20, 0))

        for record in records:
            row = tk.Frame(inner, bg=T["bg"])
            row.pack(fill=tk.X, pady=(0, 14))
            tk.Label(row, text=record.expression, font=(config.LABEL_FONT[0], 10),
                     bg=T["bg"], fg=T["subtext"], anchor=tk.W, justify=tk.LEFT,
                     wraplength=config.WINDOW_WIDTH - 80).pack(fill=tk.X)
            tk.Label(row, text=f"= {record.result}", font=(config.LABEL_FONT[0], 20),
                     bg=T["bg"], fg=T["display_fg"], anchor=tk.W).pack(fill=tk.X)
            if record.explanation:
                tk.Label(row, text=f"✨ {record.explanation}",
                         font=(config.LABEL_FONT[0], 9), bg=T["explain_bg"],
                         fg=T["explain_fg"], anchor=tk.W, justify=tk.LEFT,
                         wraplength=config.WINDOW_WIDTH - 90, padx=8, pady=6
                         ).pack(fill=tk.X, pady=(4, 0))

    # ── Event handlers ───────────────────────────────────────────────────
    def on_key(self, action):
        """Handle keypad button clicks"""
        session = self.session
        if isinstance(action, Operation):
            session.press_operation(action)
        elif action == "equal":
            session.press_equal()
        elif action == "sign":
            session.toggle_sign()
        elif action == "clear":
            session.clear_all()
        else:
            session.press_digit(action)
        self.refresh()

    def on_key_press(self, event):
        """Handle keyboard input"""
        if self.session.mode is not CalculatorMode.STANDARD:
            return

        key = event.char
        if key and key in '0123456789.':
            self.on_key(key)
        elif key and key in '+-*/%':
            self.on_key(Operation.from_symbol(key))
        elif key in ['\r', '\n', '=']:
            self.on_key("equal")
        elif event.keysym == 'Escape':
            self.on_key("clear")

    def on_toggle_mode(self):
        self.session.toggle_mode()
        self.refresh()

    def on_toggle_history(self):
        self.session.toggle_history_panel()
        self.refresh()

    def on_clear_history(self):
        self.session.clear_history()
        self.refresh()

    def on_reset_prompt(self):
        self.prompt_text.delete("1.0", tk.END)
        self._refresh_solve_button()

    def on_solve(self):
        """Start solving the prompt on a worker thread"""
        prompt = self.prompt_text.get("1.0", tk.END)
        try:
            request = self.session.start_solve(prompt)
        except SolveInProgressError:
            return
        if request is None:
            return

        self._pending_request = request
        threading.Thread(target=request.run, daemon=True).start()
        self.refresh()
        self.root.after(config.SOLVE_POLL_MS, self._poll_solve)

    def _poll_solve(self):
        request = self._pending_request
        if request is None:
            return
        if not request.done:
            self.root.after(config.SOLVE_POLL_MS, self._poll_solve)
            return

        self._pending_request = None
        try:
            self.session.finish_solve(request)
        except SolverError as e:
            logger.error("Word problem failed: %s", e)
            self._show_toast(config.SOLVE_FAILED_MESSAGE)
        self.refresh()

    def on_explain(self):
        """Fetch an explanation of the latest calculation on a worker thread"""
        if self._pending_explain is not None:
            return
        request = self.session.start_explain()
        if request is None:
            self._show_toast("No calculation to explain yet", kind="info")
            return

        self._pending_explain = request
        self.explain_btn.config(text="Explaining...", state=tk.DISABLED)
        threading.Thread(target=request.run, daemon=True).start()
        self.root.after(config.SOLVE_POLL_MS, self._poll_explain)

    def _poll_explain(self):
        request = self._pending_explain
        if request is None:
            return
        if not request.done:
            self.root.after(config.SOLVE_POLL_MS, self._poll_explain)
            return

        self._pending_explain = None
        self.session.finish_explain(request)
        self.explain_btn.config(text="Explain last", state=tk.NORMAL)
        self.refresh()
