import logging
from nicegui import ui
from rvcalyx.file_loader import FileLoader, FileType
from rvcalyx.gui.routing import drawer_menu
from rvcalyx.gui.state import app_state, trace_state

clean_out = logging.getLogger('rvcalyx.clean')

grid: ui.aggrid = None # Forward declaration


def update_grid_view():
    if grid:
        cfg = app_state.config
        grid.options['rowData'] = trace_state.get_instruction_rows(cfg.instruction_memory, abi=cfg.abi_names)
        grid.update()
        if trace_state.error:
            ui.notify(trace_state.error, type='negative')


@ui.refreshable
def summary():
    if trace_state.sim is None:
        ui.label("Select a simulation dump from the list").classes('text-xl text-gray-400')
        return
    ui.label(f"{trace_state.filename}: {trace_state.sim}").classes('text-xl text-white')


def load_file(name):
    try:
        _, sim = FileLoader.load(name)
    except (OSError, ValueError) as e:
        ui.notify(f"Error loading file: {e}", type='negative')
        return

    trace_state.load(name, sim)
    app_state.last_loaded_trace = name.split('/')[-1]
    clean_out.info(f"Loaded {name}: {sim}")
    summary.refresh()
    update_grid_view()
    drawer_menu.refresh()


def content():
    with ui.row().classes('w-full h-screen no-wrap p-2 gap-4'):

        # LEFT SIDEBAR
        with ui.card().classes('w-1/4 h-full bg-slate-800 border-slate-700 column'):
            ui.label('Simulation dumps').classes('text-2xl font-bold mb-4 text-white')

            with ui.scroll_area().classes('w-full flex-grow'):
                for f in FileLoader.list_files(FileType.TRACE, app_state.config.directories):
                    with ui.button(on_click=lambda f=f: load_file(f)).classes('w-full justify-start text-lg border mb-2').props('flat color=white no-caps'):
                        ui.icon('description').classes('mr-2')
                        ui.label(f).classes('text-truncate')

        # RIGHT SIDE: LISTING
        with ui.column().classes('w-3/4 h-full'):
            summary()
            with ui.card().classes('w-full flex-grow flex-col bg-slate-900 p-0 overflow-hidden'):
                global grid
                grid = ui.aggrid({
                    'columnDefs': [
                        {'headerName': 'Slot', 'field': 'slot', 'maxWidth': 120},
                        {'headerName': 'Instruction', 'field': 'instruction'},
                    ],
                    'rowData': [],
                }).classes('w-full h-full text-xl')
            update_grid_view()
