import unittest

from plugin.anti_delete.models import MediaKind, MessageUpdate, WAMessage


class TestPayloadModels(unittest.TestCase):
    def test_camel_case_payload(self) -> None:
        msg = WAMessage.model_validate(
            {
                "key": {"remoteJid": "1@g.us", "id": "M1", "fromMe": True, "participant": "2@s.whatsapp.net"},
                "message": {"extendedTextMessage": {"text": "hey", "contextInfo": {"x": 1}}},
                "pushName": "Bob",
            }
        )
        self.assertTrue(msg.key.from_me)
        self.assertEqual(msg.chat_id, "1@g.us")
        self.assertEqual(msg.sender_id, "2@s.whatsapp.net")
        self.assertEqual(msg.message.text(), "hey")
        # 未声明字段原样保留
        self.assertEqual(msg.message.extended_text_message.dump()["contextInfo"], {"x": 1})

    def test_sender_falls_back_to_chat(self) -> None:
        msg = WAMessage.model_validate({"key": {"remoteJid": "9@s.whatsapp.net", "id": "M1"}})
        self.assertEqual(msg.sender_id, "9@s.whatsapp.net")
        self.assertIsNone(msg.message)

    def test_text_priority(self) -> None:
        msg = WAMessage.model_validate(
            {
                "key": {"remoteJid": "1@g.us", "id": "M1"},
                "message": {
                    "imageMessage": {"caption": "image caption"},
                    "documentMessage": {"caption": "doc caption"},
                },
            }
        )
        self.assertEqual(msg.message.text(), "image caption")

        msg = WAMessage.model_validate(
            {"key": {"remoteJid": "1@g.us", "id": "M2"}, "message": {"videoMessage": {"caption": "v"}}}
        )
        self.assertEqual(msg.message.text(), "v")

    def test_media_payload_order_and_voice(self) -> None:
        msg = WAMessage.model_validate(
            {
                "key": {"remoteJid": "1@g.us", "id": "M1"},
                "message": {
                    "documentMessage": {"mimetype": "application/pdf", "fileName": "a.pdf"},
                    "audioMessage": {"mimetype": "audio/ogg", "ptt": True},
                    "imageMessage": {"mimetype": "image/jpeg"},
                },
            }
        )
        kinds = [p.kind for p in msg.message.media_payloads()]
        self.assertEqual(kinds, [MediaKind.IMAGE, MediaKind.VOICE, MediaKind.DOCUMENT])
        self.assertEqual(msg.message.document_message.file_name, "a.pdf")

    def test_media_kind_helpers(self) -> None:
        self.assertEqual(MediaKind.VOICE.download_type, "audio")
        self.assertEqual(MediaKind.VOICE.send_field, "audio")
        self.assertEqual(MediaKind.STICKER.send_field, "sticker")
        self.assertEqual(MediaKind.IMAGE.label, "Image")
        self.assertTrue(MediaKind.VOICE.default_mimetype.startswith("audio/ogg"))

    def test_update_defaults(self) -> None:
        upd = MessageUpdate.model_validate({"key": {"remoteJid": "1@g.us", "id": "M1"}})
        self.assertIsNone(upd.update.message_stub_type)
        self.assertIsNone(upd.update.participant)


if __name__ == "__main__":
    unittest.main()
