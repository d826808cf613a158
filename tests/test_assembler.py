"""
Assembler tests: line classification, initializers, arity checks and
label resolution.
"""
import pytest

from calysto_vmal.assembler import (Assembler, AssemblyError,
                                    AssemblySemanticError, AssemblySyntaxError,
                                    Instruction, assemble, parse_number)


class TestComments:
    def test_comment_only(self):
        assert assemble("#test").instructions == []

    def test_comment_before_instruction(self):
        a = assemble("#test\nADD A, B;")
        assert a.instructions == [Instruction('ADD', (0xA, 0xB))]

    def test_comment_after_instruction(self):
        a = assemble("ADD A, B; #Test")
        assert a.instructions == [Instruction('ADD', (0xA, 0xB))]

    def test_blank_lines_ignored(self):
        assert assemble("\n\n   \nRD;\n\n") == assemble("RD;")

    def test_comment_hides_semicolon(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("RD # ;")
        assert info.value.message == "Missing semicolon"


class TestInitializers:
    def test_register_decimal(self):
        assert assemble("4: 1024;").register_inits == [(4, 1024)]

    def test_register_hex(self):
        assert assemble("4: 0x1D;").register_inits == [(4, 29)]

    def test_register_binary(self):
        assert assemble("4: 0b1010;").register_inits == [(4, 10)]

    def test_register_hex_digit(self):
        assert assemble("c: 3;").register_inits == [(12, 3)]

    def test_negative_value(self):
        assert assemble("3: -5;").register_inits == [(3, -5)]

    def test_memory_decimal(self):
        assert assemble("[1024]: 34;").memory_inits == [(1024, 34)]

    def test_memory_hex_and_binary_addresses(self):
        assert assemble("[0x401]: 0b101;").memory_inits == [(0x401, 5)]
        assert assemble("[0b10000000010]: 0x10;").memory_inits == [(1026, 16)]

    def test_initializers_emit_no_instructions(self):
        a = assemble("1: 2;\n[3]: 4;")
        assert a.instructions == []
        assert a.register_inits == [(1, 2)]
        assert a.memory_inits == [(3, 4)]

    def test_initializer_order_preserved(self):
        a = assemble("1: 1;\n1: 2;\n2: 3;")
        assert a.register_inits == [(1, 1), (1, 2), (2, 3)]

    def test_invalid_register(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("G: 1;")
        assert "Invalid register in register initializer" in info.value.message

    def test_invalid_location(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("12: 1;")
        assert info.value.message == "Invalid syntax for register/memory initializer"

    def test_invalid_hex_literal(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("1: 0xZZ;")
        assert "hexadecimal" in info.value.message

    def test_invalid_binary_literal(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("[0b102]: 1;")
        assert "binary" in info.value.message
        assert "memory" in info.value.message

    def test_invalid_decimal_literal(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("1: 12a;")
        assert "character" in info.value.message


class TestParseNumber:
    def test_bases(self):
        assert parse_number("42") == 42
        assert parse_number("0xff") == 255
        assert parse_number("0b11") == 3
        assert parse_number("-7") == -7

    def test_rejects_underscores_and_spaces(self):
        for text in ("1_000", " 1", "0x", "", "0b"):
            with pytest.raises(ValueError):
                parse_number(text)


class TestInstructions:
    def test_two_registers(self):
        a = assemble("ADD E, A;")
        assert a.instructions == [Instruction('ADD', (0xE, 0xA))]

    def test_case_insensitive(self):
        assert assemble("AdD e, A;") == assemble("ADD E, A;")

    def test_every_opcode(self):
        source = "\n".join([
            "LBL top;",
            "SA 1;", "RB 2;", "RD;", "WR;", "SB 3;", "SF 4;",
            "GO top;", "BIN top;", "BIZ top;",
            "ADD 1, 2;", "AND 1, 2;", "MV 1, 2;", "NOT 1, 2;",
            "RS 1, 2;", "LS 1, 2;", "SW 1, 2;", "PRINT;",
        ])
        ops = [op for op, args in assemble(source).instructions]
        assert ops == ['SA', 'RB', 'RD', 'WR', 'SB', 'SF', 'GO', 'BIN', 'BIZ',
                       'ADD', 'AND', 'MV', 'NOT', 'RS', 'LS', 'SW', 'PRINT']

    def test_zero_argument(self):
        assert assemble("rd;\nWr;\nprint;").instructions == [
            Instruction('RD', ()), Instruction('WR', ()), Instruction('PRINT', ())]

    def test_unknown_operation(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("JMP 1;")
        assert info.value.message == "Unknown operation 'JMP'"

    def test_missing_semicolon(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("RD;\nADD 1, 2")
        assert info.value.lineno == 2
        assert info.value.line == "ADD 1, 2"

    def test_trailing_text(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("RD; WR;")
        assert "Extra non-comment character sequence" in info.value.message

    def test_empty_statement(self):
        with pytest.raises(AssemblySyntaxError):
            assemble(";")

    def test_too_many_arguments(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("SA 1, 2;")
        assert info.value.message == (
            "Too many arguments for SA operation (expected 1 register, got 2 args)")

    def test_not_enough_arguments(self):
        with pytest.raises(AssemblySyntaxError) as info:
            assemble("ADD 1;")
        assert info.value.message == (
            "Not enough arguments for ADD operation (expected 2 registers, got 1 args)")

    def test_zero_argument_op_with_argument(self):
        with pytest.raises(AssemblySyntaxError):
            assemble("RD 1;")

    def test_branch_without_label(self):
        with pytest.raises(AssemblySyntaxError):
            assemble("GO;")

    def test_register_must_be_one_digit(self):
        for source in ("SA 10;", "ADD 1, 10;", "ADD G, 1;", "SB R1;"):
            with pytest.raises(AssemblySyntaxError):
                assemble(source)


class TestLabels:
    def test_label_binds_to_previous_instruction(self):
        a = assemble("LBL Jump;\nADD E,7;\nSF E;\nBIZ Jump;")
        assert a.instructions == [
            Instruction('ADD', (0xE, 0x7)),
            Instruction('SF', (0xE,)),
            Instruction('BIZ', (-1,)),
        ]

    def test_forward_reference(self):
        a = assemble("GO end;\nRD;\nLBL end;\nWR;")
        assert a.instructions[0] == Instruction('GO', (1,))
        assert a.labels == {'end': 1}

    def test_labels_are_case_sensitive(self):
        with pytest.raises(AssemblySemanticError):
            assemble("LBL a;\nGO A;")

    def test_undefined_label_cites_reference_line(self):
        with pytest.raises(AssemblySemanticError) as info:
            assemble("RD;\nBIN nowhere;\nWR;")
        assert info.value.lineno == 2
        assert info.value.line == "BIN nowhere;"
        assert info.value.message == "Undefined label reference - 'nowhere'"

    def test_duplicate_label(self):
        with pytest.raises(AssemblySemanticError) as info:
            assemble("LBL a;\nRD;\nLBL a;")
        assert info.value.lineno == 3
        assert info.value.message == "Label 'a' already defined"

    def test_invalid_label_name(self):
        for source in ("LBL 1abc;", "LBL a-b;", "GO 9;"):
            with pytest.raises(AssemblySyntaxError):
                assemble(source)

    def test_label_with_two_names(self):
        with pytest.raises(AssemblySyntaxError):
            assemble("LBL a, b;")


class TestAssembler:
    def test_deterministic(self):
        source = "1: 5;\n[2]: 3;\nLBL x;\nADD 1, 6;\nSF 1;\nBIN x;"
        assert assemble(source) == assemble(source)

    def test_reusable(self):
        assembler = Assembler()
        first = assembler.assemble("LBL a;\nRD;")
        second = assembler.assemble("LBL a;\nWR;")
        assert first.instructions == [Instruction('RD', ())]
        assert second.instructions == [Instruction('WR', ())]

    def test_failure_leaves_no_partial_result(self):
        assembler = Assembler()
        with pytest.raises(AssemblyError):
            assembler.assemble("RD;\n1: 2;\nBOGUS;")
        assert assembler.assemble("WR;").register_inits == []

    def test_error_message_format(self):
        with pytest.raises(AssemblyError) as info:
            assemble("RD;\n  XYZ 1;")
        assert str(info.value) == "Error on line #2: Unknown operation 'XYZ'\n\t>  XYZ 1;"

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            assemble("RD")
