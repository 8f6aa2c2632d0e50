from nicegui import ui
from rvcalyx.gui.state import app_state, disasm_state

grid: ui.aggrid = None # Forward declaration


def decode_input(text):
    errors = disasm_state.parse(text or "", abi=app_state.config.abi_names)
    for error in errors:
        ui.notify(error, type='negative')
    if grid:
        grid.options['rowData'] = disasm_state.rows
        grid.update()


def content():
    with ui.column().classes('w-full h-screen p-2 gap-4'):
        with ui.card().classes('w-full bg-slate-800 border-slate-700 p-4'):
            words = ui.textarea(label='Instruction words (hex)', placeholder='00000033 00000013 00800463',
                                value=disasm_state.text).props('dark outlined').classes('w-full font-mono')
            ui.button('Decode', icon='translate', on_click=lambda: decode_input(words.value)).classes('bg-blue-600')

        with ui.card().classes('w-full flex-grow flex-col bg-slate-900 p-0 overflow-hidden'):
            global grid
            grid = ui.aggrid({
                'columnDefs': [
                    {'headerName': 'Slot', 'field': 'slot', 'maxWidth': 120},
                    {'headerName': 'Word', 'field': 'word', 'maxWidth': 160},
                    {'headerName': 'Instruction', 'field': 'instruction'},
                ],
                'rowData': disasm_state.rows,
            }).classes('w-full h-full text-xl')
