from src.adf import extract_plain_text, parse_document, rich_text_to_plain, Paragraph, TextSpan, UnknownBlock, UnknownInline


class TestExtractPlainText:

    def test_concatenates_inline_text(self):
        document = {'content': [{'type': 'paragraph', 'content': [{'text': 'A'}, {'text': 'B'}]}]}
        assert extract_plain_text(document) == 'AB'

    def test_ignores_other_block_types(self):
        assert extract_plain_text({'content': [{'type': 'other'}]}) == ''

    def test_empty_document(self):
        assert extract_plain_text({}) == ''

    def test_paragraphs_are_separated_by_newlines(self):
        """Test extracting text from Atlassian Document Format"""
        adf_content = {
            'type': 'doc',
            'version': 1,
            'content': [
                {
                    'type': 'paragraph',
                    'content': [
                        {'type': 'text', 'text': 'Hello '},
                        {'type': 'text', 'text': 'world', 'marks': [{'type': 'strong'}]}
                    ]
                },
                {
                    'type': 'bulletList',
                    'content': [{'type': 'listItem', 'content': [{'type': 'paragraph', 'content': [{'type': 'text', 'text': 'nested'}]}]}]
                },
                {
                    'type': 'paragraph',
                    'content': [{'type': 'text', 'text': 'Second paragraph'}]
                }
            ]
        }

        assert extract_plain_text(adf_content) == 'Hello world\nSecond paragraph'

    def test_non_text_inline_nodes_are_skipped(self):
        document = {'content': [{'type': 'paragraph', 'content': [{'type': 'hardBreak'}, {'type': 'text', 'text': 'x'}]}]}
        assert extract_plain_text(document) == 'x'

    def test_malformed_input_yields_empty_string(self):
        assert extract_plain_text(None) == ''
        assert extract_plain_text('plain') == ''
        assert extract_plain_text({'content': 'not a list'}) == ''
        assert extract_plain_text({'content': [None, 3, {'type': 'paragraph'}]}) == ''

    def test_result_is_stripped(self):
        document = {'content': [{'type': 'paragraph', 'content': [{'text': '  padded  '}]}]}
        assert extract_plain_text(document) == 'padded'

    def test_empty_paragraph_is_a_blank_line(self):
        document = {'content': [
            {'type': 'paragraph', 'content': [{'type': 'text', 'text': 'A'}]},
            {'type': 'paragraph', 'content': []},
            {'type': 'paragraph', 'content': [{'type': 'text', 'text': 'B'}]}
        ]}
        assert extract_plain_text(document) == 'A\n\nB'

    def test_empty_paragraph_matches_break_only_paragraph(self):
        def document(middle):
            return {'content': [
                {'type': 'paragraph', 'content': [{'text': 'A'}]},
                {'type': 'paragraph', 'content': middle},
                {'type': 'paragraph', 'content': [{'text': 'B'}]}
            ]}

        assert extract_plain_text(document([])) == extract_plain_text(document([{'type': 'hardBreak'}]))


class TestParseDocument:

    def test_tags_recognized_and_unknown_nodes(self):
        blocks = parse_document({'content': [
            {'type': 'paragraph', 'content': [{'type': 'text', 'text': 'A'}, {'type': 'emoji'}]},
            {'type': 'heading', 'content': [{'type': 'text', 'text': 'Title'}]}
        ]})

        assert blocks == [
            Paragraph([TextSpan('A'), UnknownInline('emoji')]),
            UnknownBlock('heading')
        ]

    def test_empty_paragraph_is_still_a_paragraph(self):
        assert parse_document({'content': [{'type': 'paragraph', 'content': []}]}) == [Paragraph([])]


class TestRichTextToPlain:

    def test_plain_string_is_returned_verbatim(self):
        assert rich_text_to_plain('  As a user\nI want  ') == '  As a user\nI want  '

    def test_document_is_extracted(self):
        assert rich_text_to_plain({'content': [{'type': 'paragraph', 'content': [{'text': 'AC'}]}]}) == 'AC'

    def test_missing_value(self):
        assert rich_text_to_plain(None) == ''
        assert rich_text_to_plain(['unexpected']) == ''
