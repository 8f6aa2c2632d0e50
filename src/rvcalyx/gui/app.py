import argparse
import logging
from nicegui import ui
from rvcalyx.config import load_config
from rvcalyx.gui.routing import drawer_menu
from rvcalyx.gui.state import app_state
from rvcalyx.gui.pages import home, trace, registers, program, disasm


ROUTES = {
    '/': ('home', 'Home', home.content),
    '/trace': ('list_alt', 'Trace', trace.content),
    '/registers': ('memory', 'Registers', registers.content),
    '/program': ('upload_file', 'Program', program.content),
    '/disasm': ('translate', 'Disassembler', disasm.content),
}


raw_logger = logging.getLogger('rvcalyx.raw')
clean_logger = logging.getLogger('rvcalyx.clean')

# UI channels stay out of the root logger
raw_logger.propagate = False
clean_logger.propagate = False

class UiLogHandler(logging.Handler):
    def __init__(self, log_element: ui.log, replace: bool = False):
        super().__init__()
        self.log_element = log_element
        self.replace = replace
        # No timestamps, just the message
        self.setFormatter(logging.Formatter('%(message)s'))

    def emit(self, record):
        msg = self.format(record)
        if self.replace:
            self.log_element.clear()
        self.log_element.push(msg)


def root():
    # --- 1. Header ---
    with ui.header(elevated=False).classes('bg-black items-center justify-between px-6'):
        ui.label('RISC-V / CALYX').classes('text-xl font-bold tracking-tight')

        @ui.refreshable
        def state_labels():
            ui.label(f'TRACE: {app_state.last_loaded_trace or "-"}').classes('text-lg text-gray-400 whitespace-nowrap')
            ui.label(f'PROGRAM: {app_state.last_assembled_program or "-"}').classes('text-lg text-gray-400 whitespace-nowrap')

        with ui.row().classes('items-center gap-3 no-wrap'):
            info_icon = ui.icon('info', color='white', size="lg").classes('cursor-help')
            info_icon.on('mouseenter', lambda: state_labels.refresh())
            with info_icon:
                with ui.tooltip().classes('p-2 bg-slate-800'):
                    state_labels()

    # --- 2. Left Drawer ---
    with ui.left_drawer(value=True).classes('bg-slate-800'):
        drawer_menu(ROUTES)

    # --- 3. Footer (Fixed at bottom) ---
    with ui.footer().classes("h-[25vh] bg-slate-900 flex flex-col "):
            with ui.tabs().classes("m-0 p-0") as tabs:
                raw_tab = ui.tab('Raw', icon='sync_alt')
                clean_tab = ui.tab('Clean', icon='terminal')

            with ui.tab_panels(tabs, value=clean_tab).classes('w-full flex flex-col grow bg-black font-mono text-lg p-0 m-0 overflow-hidden'):
                with ui.tab_panel(raw_tab):
                    # Hex words
                    raw_log = ui.log().classes('w-full grow text-green-500 overflow-auto')
                with ui.tab_panel(clean_tab):
                    # Formatted status
                    clean_log = ui.log().classes('w-full flex flex-col grow text-blue-300 overflow-auto')

    raw_logger.handlers.clear()
    clean_logger.handlers.clear()
    raw_logger.addHandler(UiLogHandler(raw_log))
    clean_logger.addHandler(UiLogHandler(clean_log))
    raw_logger.setLevel(logging.INFO)
    clean_logger.setLevel(logging.INFO)

    with ui.column().classes('absolute-full p-6 overflow-hidden'):
        ui.sub_pages({route: info[2] for route, info in ROUTES.items()}).classes('w-full h-full overflow-auto')


def main():
    parser = argparse.ArgumentParser(description="RISC-V / Calyx browser front end")
    parser.add_argument('--config', default=None, help="JSON config file (default: ./rvcalyx.json)")
    parser.add_argument('--port', type=int, default=8080)
    args = parser.parse_args()

    app_state.config = load_config(args.config)
    ui.run(root, title="RISC-V Calyx Tools", dark=True, port=args.port, reload=False)


if __name__ == '__main__':
    main()
