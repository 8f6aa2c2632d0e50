from nicegui import ui
from rvcalyx.gui.state import app_state


def content():
    with ui.column().classes('w-full items-center p-8 gap-4'):
        with ui.card().classes('w-full max-w-2xl bg-slate-800 border-slate-700'):
            ui.label('RISC-V / Calyx tools').classes('text-2xl font-semibold text-blue-400')
            ui.separator().classes('bg-slate-700')
            ui.markdown(
                "- **Trace**: decode the instruction memory of a Calyx simulation dump\n"
                "- **Registers**: register file of the loaded dump\n"
                "- **Program**: assemble a RISC-V program into a Calyx data file\n"
                "- **Disassembler**: decode raw hex words"
            ).classes('text-lg text-white')

        with ui.card().classes('w-full max-w-2xl bg-slate-800 border-slate-700'):
            ui.label('Configuration').classes('text-xl font-semibold text-blue-400')
            ui.separator().classes('bg-slate-700')
            cfg = app_state.config
            for key, value in (('Assembler', cfg.assembler),
                               ('Instruction memory', cfg.instruction_memory),
                               ('Register memory', cfg.register_memory),
                               ('ABI register names', 'yes' if cfg.abi_names else 'no')):
                with ui.row().classes('w-full justify-between'):
                    ui.label(key).classes('text-gray-400')
                    ui.label(value).classes('font-mono text-white')
