from nicegui import ui
from rvcalyx.gui.state import app_state, trace_state

grid: ui.aggrid = None # Forward declaration


def update_grid_view():
    if grid:
        grid.options['rowData'] = trace_state.get_register_rows(app_state.config.register_memory)
        grid.update()


def change_format(value):
    trace_state.view_format = value
    update_grid_view()


def content():
    with ui.column().classes('w-full h-screen p-2 gap-4'):
        with ui.card().classes('w-full flex-grow flex-col bg-slate-900 p-0 overflow-hidden'):
            global grid
            grid = ui.aggrid({
                'columnDefs': [
                    {'headerName': 'Register', 'field': 'register', 'maxWidth': 140},
                    {'headerName': 'ABI name', 'field': 'name', 'maxWidth': 140},
                    {'headerName': 'Value', 'field': 'value'},
                ],
                'rowData': trace_state.get_register_rows(app_state.config.register_memory),
            }).classes('w-full h-full text-xl')

        with ui.card().classes('w-full bg-slate-800 border-slate-700 p-4'):
            with ui.row().classes('items-center'):
                ui.label('Display Format:').classes('text-white font-bold mr-2')
                ui.radio(['HEX', 'BIN', 'DEC'], value=trace_state.view_format, on_change=lambda e: change_format(e.value)) \
                    .props('inline color=blue-500 dark')
