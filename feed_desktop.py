"""Tkinter window for Feed whatever you want.

One small fixed-size window: the character's picture, a dropdown of foods
discovered under ``Foods/``, an info button, a feed button and the running
score. The window owns the :class:`~feed_sequencer.FeedSession` and acts as
the sequencer's view, while the Tk root doubles as its scheduler.
"""
from __future__ import annotations

import tkinter as tk
from tkinter import messagebox, ttk
from typing import Dict, List, Optional

from PIL import Image, ImageTk

from app_logging import configure_logging, get_logger
from feed_assets import (
    BAD_IMAGE,
    GOOD_IMAGE,
    IDLE_IMAGE,
    VERY_BAD_IMAGE,
    SoundBank,
    load_character_art,
    load_food_image,
)
from feed_config import PICTURE_PX, WINDOW_SIZE, WINDOW_TITLE, AppConfig
from feed_sequencer import FeedOutcome, FeedSequencer, FeedSession
from food_catalog import (
    FoodRecord,
    can_feed,
    describe_food,
    food_image_path,
    scan_catalog,
    sorted_food_names,
)

logger = get_logger(__name__)

OUTCOME_IMAGES: Dict[FeedOutcome, str] = {
    FeedOutcome.GOOD: GOOD_IMAGE,
    FeedOutcome.BAD: BAD_IMAGE,
    FeedOutcome.VERY_BAD: VERY_BAD_IMAGE,
}

NO_SELECTION_TIP = "Select a food first"
NO_DATA_TIP = "No data for the selected food"
INFO_TITLE = "Food info"
INFO_POPUP_SIZE = (200, 150)


class Tooltip:
    """A borderless hint shown under a widget for a limited time."""

    def __init__(self, widget: tk.Widget) -> None:
        self.widget = widget
        self.window: Optional[tk.Toplevel] = None
        self._hide_job: Optional[str] = None

    def show(self, text: str, duration_ms: int) -> None:
        self.hide()
        x = self.widget.winfo_rootx()
        y = self.widget.winfo_rooty() + self.widget.winfo_height() + 2
        window = tk.Toplevel(self.widget)
        window.wm_overrideredirect(True)
        window.wm_geometry(f"+{x}+{y}")
        tk.Label(
            window,
            text=text,
            background="#ffffe0",
            relief="solid",
            borderwidth=1,
            padx=4,
            pady=2,
        ).pack()
        self.window = window
        self._hide_job = self.widget.after(duration_ms, self.hide)

    def hide(self) -> None:
        if self._hide_job is not None:
            try:
                self.widget.after_cancel(self._hide_job)
            except tk.TclError:
                pass
            self._hide_job = None
        if self.window is not None:
            self.window.destroy()
            self.window = None


class FeedApp:
    def __init__(
        self,
        root: tk.Tk,
        config: Optional[AppConfig] = None,
        *,
        sounds: Optional[SoundBank] = None,
    ) -> None:
        self.root = root
        self.config = config or AppConfig()
        width, height = WINDOW_SIZE
        self.root.title(WINDOW_TITLE)
        self.root.geometry(f"{width}x{height}")
        self.root.resizable(False, False)

        self.art = load_character_art(self.config.asset_dir)
        self.sounds = sounds if sounds is not None else SoundBank(self.config.asset_dir)
        self._photo_cache: Dict[str, ImageTk.PhotoImage] = {}
        self._current_photo: Optional[ImageTk.PhotoImage] = None
        self.info_popup: Optional[tk.Toplevel] = None

        self.foods: Dict[str, FoodRecord] = self._load_foods()
        self.session = self._open_session()
        self.sequencer = FeedSequencer(
            self.session, self, self.root, step_delay_ms=self.config.step_delay_ms
        )

        self.food_var = tk.StringVar(value="")
        self.score_var = tk.StringVar(value="0")

        self._set_window_icon()
        self._build_layout()
        self._populate_foods()
        self.show_idle()
        self.show_score(self.session.total_points)

    # ----------------- startup -----------------
    def _load_foods(self) -> Dict[str, FoodRecord]:
        try:
            return scan_catalog(self.config.foods_dir).foods
        except OSError:
            logger.exception("Could not scan foods in %s", self.config.foods_dir)
            return {}

    def _open_session(self) -> FeedSession:
        try:
            return FeedSession.open(self.config.userdata_path)
        except OSError:
            logger.exception("Could not read progress from %s", self.config.userdata_path)
            return FeedSession(progress_path=self.config.userdata_path)

    def _set_window_icon(self) -> None:
        if self.art.window_icon is None:
            return
        try:
            icon = ImageTk.PhotoImage(self.art.window_icon)
            self.root.iconphoto(True, icon)
        except tk.TclError as exc:
            logger.info("Window icon not applied: %s", exc)
            return
        self._photo_cache["window_icon"] = icon

    def _build_layout(self) -> None:
        self.picture = tk.Label(
            self.root,
            borderwidth=1,
            relief="solid",
            background="white",
        )
        self.picture.place(x=60, y=10, width=PICTURE_PX, height=PICTURE_PX)

        self.food_combo = ttk.Combobox(
            self.root,
            textvariable=self.food_var,
            state="readonly",
        )
        self.food_combo.place(x=10, y=120, width=150)
        self.food_combo.bind("<<ComboboxSelected>>", self._on_food_selected)

        self.info_button = tk.Button(
            self.root,
            image=self._photo("info_icon", self.art.info_icon),
            relief="flat",
            borderwidth=1,
            command=self.show_food_info,
        )
        self.info_button.place(x=165, y=120, width=20, height=20)
        self.tooltip = Tooltip(self.info_button)

        self.feed_button = ttk.Button(
            self.root,
            text="Feed!",
            command=self.feed_selected,
            state="disabled",
        )
        self.feed_button.place(x=10, y=150, width=180)

        self.score_label = ttk.Label(
            self.root,
            textvariable=self.score_var,
            anchor="center",
            font=("TkDefaultFont", 12, "bold"),
        )
        self.score_label.place(x=10, y=190, width=200)

    def _populate_foods(self) -> None:
        names: List[str] = sorted_food_names(self.foods)
        self.food_combo.configure(values=names)
        if names:
            self.food_var.set(names[0])
        self._refresh_feed_button()

    def _photo(self, key: str, image: Image.Image) -> ImageTk.PhotoImage:
        cached = self._photo_cache.get(key)
        if cached is None:
            cached = ImageTk.PhotoImage(image)
            self._photo_cache[key] = cached
        return cached

    def _display(self, photo: ImageTk.PhotoImage) -> None:
        self._current_photo = photo
        self.picture.configure(image=photo)

    # ----------------- selection -----------------
    def selected_food_name(self) -> Optional[str]:
        name = self.food_var.get()
        return name or None

    def selected_record(self) -> Optional[FoodRecord]:
        name = self.selected_food_name()
        if name is None:
            return None
        return self.foods.get(name)

    def _on_food_selected(self, _event=None) -> None:
        self._refresh_feed_button()

    def _refresh_feed_button(self) -> None:
        enabled = not self.session.busy and can_feed(self.selected_record())
        self.feed_button.configure(state="normal" if enabled else "disabled")

    # ----------------- actions -----------------
    def feed_selected(self) -> bool:
        name = self.selected_food_name()
        record = self.selected_record()
        if name is None or record is None:
            return False
        return self.sequencer.feed(name, record)

    def show_food_info(self) -> None:
        name = self.selected_food_name()
        if name is None:
            self.tooltip.show(NO_SELECTION_TIP, self.config.tooltip_ms)
            return
        record = self.foods.get(name)
        if record is None:
            self.tooltip.show(NO_DATA_TIP, self.config.tooltip_ms)
            return
        self._open_info_popup(name, record)

    def _open_info_popup(self, name: str, record: FoodRecord) -> None:
        self._close_info_popup()
        popup = tk.Toplevel(self.root)
        popup.title(INFO_TITLE)
        popup.transient(self.root)
        popup.resizable(False, False)
        popup.attributes("-topmost", True)
        width, height = INFO_POPUP_SIZE
        x = self.info_button.winfo_rootx()
        y = self.info_button.winfo_rooty() + self.info_button.winfo_height()
        popup.geometry(f"{width}x{height}+{x}+{y}")
        ttk.Label(
            popup,
            text=describe_food(name, record),
            anchor="center",
            justify="center",
        ).pack(fill="both", expand=True, padx=8, pady=8)
        popup.protocol("WM_DELETE_WINDOW", self._close_info_popup)
        self.info_popup = popup

    def _close_info_popup(self) -> None:
        if self.info_popup is not None:
            self.info_popup.destroy()
            self.info_popup = None

    # ----------------- FeedView -----------------
    def play_feed_sound(self, is_drink: bool) -> None:
        self.sounds.play(is_drink)

    def show_food(self, name: str) -> None:
        image = load_food_image(food_image_path(self.config.foods_dir, name), name)
        self._display(ImageTk.PhotoImage(image))

    def show_outcome(self, outcome: FeedOutcome) -> None:
        key = OUTCOME_IMAGES[outcome]
        self._display(self._photo(key, self.art.get(key)))

    def show_idle(self) -> None:
        self._display(self._photo(IDLE_IMAGE, self.art.get(IDLE_IMAGE)))

    def show_score(self, total_points: int) -> None:
        self.score_var.set(str(total_points))

    def set_feed_enabled(self, enabled: bool) -> None:
        if enabled:
            self._refresh_feed_button()
        else:
            self.feed_button.configure(state="disabled")

    def notify_failure(self, message: str) -> None:
        messagebox.showerror(WINDOW_TITLE, message, parent=self.root)


def main() -> None:
    configure_logging()
    root = tk.Tk()
    FeedApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
