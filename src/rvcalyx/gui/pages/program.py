import logging
from nicegui import run, ui
from rvcalyx.assembler import AssemblerError, assemble_words
from rvcalyx.file_loader import FileLoader, FileType
from rvcalyx.gui.state import app_state, program_state
from rvcalyx.loader import LoaderError

clean_out = logging.getLogger('rvcalyx.clean')


@ui.refreshable
def code_viewer():
    ui.code(program_state.content, language='asm').classes('w-full h-full text-lg')


@ui.refreshable
def result_viewer():
    if not program_state.ready:
        return
    ui.aggrid({
        'columnDefs': [
            {'headerName': 'Address', 'field': 'address', 'maxWidth': 140},
            {'headerName': 'Word', 'field': 'word', 'maxWidth': 160},
            {'headerName': 'Instruction', 'field': 'instruction'},
        ],
        'rowData': program_state.get_rows(abi=app_state.config.abi_names),
    }).classes('w-full h-64 text-lg')
    ui.code(program_state.data_file_json(app_state.config.instruction_memory), language='json').classes('w-full text-sm')


def load(name):
    _, program_state.content = FileLoader.load(name)
    program_state.filename = name
    program_state.ready = False
    code_viewer.refresh()
    result_viewer.refresh()


async def assemble():
    if not program_state.filename:
        ui.notify("No program selected", type='warning')
        return
    try:
        words = await run.io_bound(assemble_words, program_state.filename, app_state.config.assembler)
    except (AssemblerError, LoaderError) as e:
        ui.notify(f"Assembly failed: {e}", type='negative')
        return

    program_state.set_words(words)
    app_state.last_assembled_program = program_state.filename.split("/")[-1]
    clean_out.info(f"Assembled {len(words)} instructions from {program_state.filename}")
    result_viewer.refresh()
    ui.notify("Success!", type='positive')


def content():
    with ui.row().classes('w-full h-full no-wrap p-2 gap-4'):
        with ui.card().classes('w-1/4 h-full bg-slate-800 border-slate-700'):
            ui.label('Programs').classes('text-xl font-bold mb-4')
            for f in FileLoader.list_files(FileType.ASSEMBLY, app_state.config.directories):
                with ui.button(on_click=lambda f=f: load(f)).classes('flex-none w-full p-5 justify-start text-lg border').props('flat color=white no-caps'):
                    ui.icon('file_open').classes('mr-2')
                    ui.label(f).classes('text-lg')

        with ui.column().classes('w-3/4 h-full'):
            with ui.card().classes('w-full h-1/2 bg-slate-900 p-0 overflow-hidden'):
                code_viewer()

            ui.button('Assemble', icon='extension', on_click=assemble) \
                .classes('w-full font-bold').props('size=lg')

            with ui.column().classes('w-full'):
                result_viewer()
