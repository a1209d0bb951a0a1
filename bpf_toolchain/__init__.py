"""Bootstrap of the patched LLVM + sbpf-linker toolchain for the u128 BPF prototype."""
