from amaranth.lib.data import StructLayout
from mintaka.isa import RegDst
from mintaka.isa import AluSrc
from mintaka.isa import MemToReg
from mintaka.isa import AluOp
from mintaka.isa import ImmExt

# decoder output
control_layout = StructLayout({
    'reg_dst':    RegDst,
    'alu_src':    AluSrc,
    'mem_to_reg': MemToReg,
    'alu_op':     AluOp,
    'imm_ext':    ImmExt,
    'mem_read':   1,
    'mem_write':  1,
    'reg_write':  1,
    'branch':     1,
    'jump':       1
})

# layout for pipeline stages
_fd_layout = {
    'pc4':         32,
    'instruction': 32
}

_dx_layout = {
    'pc4':        32,
    'rs':          5,
    'rt':          5,
    'rd':          5,
    'rs_data':    32,
    'rt_data':    32,
    'immediate':  32,
    'shamt':       5,
    'alu_src':    AluSrc,
    'alu_op':     AluOp,
    'mem_read':    1,
    'mem_write':   1,
    'reg_write':   1,
    'mem_to_reg': MemToReg
}

_xm_layout = {
    'pc4':        32,
    'rd':          5,
    'result':     32,
    'store_data': 32,
    'mem_read':    1,
    'mem_write':   1,
    'reg_write':   1,
    'mem_to_reg': MemToReg
}

_mw_layout = {
    'pc4':        32,
    'rd':          5,
    'result':     32,
    'load_data':  32,
    'reg_write':   1,
    'mem_to_reg': MemToReg
}
